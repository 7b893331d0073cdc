"""Latest-query-wins coalescing for search-as-you-type."""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

Q = TypeVar("Q")
R = TypeVar("R")


class LatestQuery(Generic[Q, R]):
    """Run ``fetch`` for submitted queries and apply only the newest result.

    Each ``submit`` bumps a generation counter. When ``delay`` is positive the
    fetch is deferred by a timer and a newer submit cancels the pending timer
    (debounce). A fetch that completes after a newer query was submitted is
    discarded, so an old slow response can never overwrite a newer one.
    """

    def __init__(
        self,
        fetch: Callable[[Q], R],
        apply: Callable[[R], None],
        delay: float = 0.0,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._fetch = fetch
        self._apply = apply
        self._delay = delay
        self._on_error = on_error
        self._generation = 0
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, query: Q) -> int:
        """Schedule ``query`` and return its generation number."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._delay > 0:
                self._timer = threading.Timer(self._delay, self.run, args=(generation, query))
                self._timer.daemon = True
                self._timer.start()
                return generation

        self.run(generation, query)
        return generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def run(self, generation: int, query: Q) -> bool:
        """Fetch ``query`` and apply the result if still current.

        Returns True when the result was applied. Errors of a stale query are
        dropped; errors of the current query go to ``on_error`` or are raised.
        """
        try:
            result = self._fetch(query)
        except Exception as exc:
            if not self.is_current(generation):
                logger.debug("Ignoring error of superseded query %r: %s", query, exc)
                return False
            if self._on_error is None:
                raise
            self._on_error(exc)
            return False

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding result of superseded query %r", query)
                return False
            self._apply(result)
        return True

    def cancel(self) -> None:
        """Cancel any pending timer and invalidate outstanding queries."""
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
