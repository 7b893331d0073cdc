"""Bounded memo table with in-flight de-duplication."""

import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future
from typing import Callable, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoTable(Generic[K, V]):
    """Map from key to a lazily loaded value.

    At most ``maxsize`` values are kept; the least recently used one is
    evicted first. A key being loaded is tracked in an in-flight table so
    that concurrent ``get`` calls for the same key share one load instead of
    issuing duplicate fetches. Failed loads are not cached: every waiter sees
    the error and the next ``get`` tries again.
    """

    def __init__(self, loader: Callable[[K], V], maxsize: int = 256):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._loader = loader
        self._maxsize = maxsize
        self._values: OrderedDict[K, V] = OrderedDict()
        self._inflight: dict[K, Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: K) -> bool:
        return key in self._values

    def peek(self, key: K) -> Optional[V]:
        """Return the cached value without loading, or None."""
        with self._lock:
            return self._values.get(key)

    def is_loading(self, key: K) -> bool:
        with self._lock:
            return key in self._inflight

    def get(self, key: K) -> V:
        """Return the value for ``key``, loading it once if needed."""
        with self._lock:
            if key in self._values:
                self._values.move_to_end(key)
                return self._values[key]
            pending = self._inflight.get(key)
            if pending is None:
                pending = Future()
                self._inflight[key] = pending
                owner = True
            else:
                owner = False

        if not owner:
            logger.debug("Waiting for in-flight load of %r", key)
            return pending.result()

        try:
            value = self._loader(key)
        except BaseException as exc:
            with self._lock:
                del self._inflight[key]
            pending.set_exception(exc)
            raise

        with self._lock:
            del self._inflight[key]
            self._values[key] = value
            self._values.move_to_end(key)
            while len(self._values) > self._maxsize:
                evicted, _ = self._values.popitem(last=False)
                logger.debug("Evicted %r from memo table", evicted)
        pending.set_result(value)
        return value

    def invalidate(self, key: Optional[K] = None) -> None:
        """Drop one cached value, or all of them when ``key`` is None."""
        with self._lock:
            if key is None:
                self._values.clear()
            else:
                self._values.pop(key, None)
