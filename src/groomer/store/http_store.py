"""REST implementation of the store interface using httpx."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence, TypeVar

import httpx

from groomer.domain.entities import (
    Appointment,
    AppointmentStatus,
    CatalogItem,
    Envelope,
    Payment,
    PaymentMethod,
    Pet,
    Visit,
    VisitItem,
    VisitItemCategory,
)
from groomer.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from groomer.session import SessionContext
from groomer.store import wire
from groomer.store.base import Store
from groomer.utils.time_windows import to_iso_local

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MESSAGES = {
    ValidationError: "The store rejected the submitted data.",
    NotFoundError: "The requested resource was not found.",
    ConflictError: "The operation conflicts with a business rule.",
    UnauthorizedError: "Session is invalid or expired.",
    TransportError: "The store failed to process the request. Try again.",
}


def error_class_for_status(status: int) -> type[DomainError]:
    """Map an HTTP status to the domain error kind."""
    if status in (400, 422):
        return ValidationError
    if status in (401, 403):
        return UnauthorizedError
    if status == 404:
        return NotFoundError
    if status == 409:
        return ConflictError
    return TransportError


def _force_param(force_overlap: bool) -> dict[str, str]:
    return {"forceOverlap": "true" if force_overlap else "false"}


class HttpStore(Store):
    """Store backed by the grooming REST API.

    ``base_url`` already includes the API prefix, e.g.
    ``http://localhost:8080/api/v1``. Credentials come from the
    :class:`SessionContext`; a 401 answer invalidates it.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the HTTP store.

        Args:
            base_url: API root URL
            session: Session context supplying the bearer token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionContext()
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get current client, creating one if needed."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this only creates the client
        self._get_client()

    def disconnect(self) -> None:
        """Disconnect from the store."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        client = self._get_client()
        headers = self.session.auth_headers()
        kwargs: dict[str, Any] = {"params": params, "headers": headers}
        if body is not None:
            kwargs["json"] = body

        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out: %s", method, path, e)
            raise TransportError("The request timed out.", details=str(e)) from e
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise TransportError("Could not connect to the store.", details=str(e)) from e

        if response.is_error:
            raise self._error_for(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "The store returned a malformed response.",
                status=response.status_code,
                details=response.text,
            ) from e

    def _error_for(self, response: httpx.Response) -> DomainError:
        status = response.status_code
        try:
            details = response.json()
        except ValueError:
            details = {"url": str(response.request.url)}

        error_class = error_class_for_status(status)
        if error_class is UnauthorizedError and status == 401:
            self.session.invalidate()

        message = None
        if isinstance(details, dict):
            message = details.get("message") or details.get("detail")
        message = f"{message or DEFAULT_MESSAGES[error_class]} [HTTP {status}]"

        if status >= 500:
            logger.error("Store error %s on %s", status, response.request.url)
        else:
            logger.info("Store rejected %s with %s", response.request.url, status)
        return error_class(message, status=status, details=details)

    def _envelope(self, body: Any, decode: Callable[[Any], T]) -> Envelope[T]:
        try:
            envelope = wire.envelope_from_json(body, decode)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Could not decode store response: %s", e)
            raise TransportError("The store returned a malformed response.", details=body) from e
        for warning in envelope.warnings:
            logger.warning("Store warning: %s", warning)
        return envelope

    # Appointment operations
    def create_appointment(
        self,
        pet_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        body = self._request(
            "POST",
            "/appointments",
            params=_force_param(force_overlap),
            body=wire.appointment_create_body(pet_id, start_at, end_at, notes),
        )
        return self._envelope(body, wire.appointment_from_json)

    def get_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        body = self._request("GET", f"/appointments/{appointment_id}")
        return self._envelope(body, wire.appointment_from_json)

    def list_appointments(
        self,
        start: datetime,
        end: datetime,
        status: Optional[AppointmentStatus] = None,
    ) -> Envelope[list[Appointment]]:
        params = {"from": to_iso_local(start), "to": to_iso_local(end)}
        if status is not None:
            params["status"] = status.value
        body = self._request("GET", "/appointments", params=params)
        return self._envelope(body, wire.list_of(wire.appointment_from_json))

    def update_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        body = self._request(
            "PUT",
            f"/appointments/{appointment_id}",
            params=_force_param(force_overlap),
            body=wire.appointment_update_body(start_at, end_at, notes),
        )
        return self._envelope(body, wire.appointment_from_json)

    def reschedule_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        body = self._request(
            "POST",
            f"/appointments/{appointment_id}/reschedule",
            params=_force_param(force_overlap),
            body=wire.appointment_reschedule_body(start_at, end_at, reason),
        )
        return self._envelope(body, wire.appointment_from_json)

    def cancel_appointment(
        self,
        appointment_id: int,
        reason: str,
        charge_method: Optional[PaymentMethod] = None,
        charge_amount: Optional[Decimal] = None,
    ) -> Envelope[Appointment]:
        body = self._request(
            "POST",
            f"/appointments/{appointment_id}/cancel",
            body=wire.appointment_cancel_body(reason, charge_method, charge_amount),
        )
        return self._envelope(body, wire.appointment_from_json)

    def attend_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        body = self._request("POST", f"/appointments/{appointment_id}/attend")
        return self._envelope(body, wire.appointment_from_json)

    # Visit operations
    def create_visit(
        self,
        pet_id: int,
        visited_at: datetime,
        items: Sequence[VisitItem],
        payment: Optional[Payment] = None,
        notes: Optional[str] = None,
        appointment_id: Optional[int] = None,
        auto_create_appointment: bool = False,
    ) -> Envelope[Visit]:
        body = self._request(
            "POST",
            "/visits",
            body=wire.visit_create_body(
                pet_id, visited_at, items, payment, notes, appointment_id, auto_create_appointment
            ),
        )
        return self._envelope(body, wire.visit_from_json)

    def get_visit(self, visit_id: int) -> Envelope[Visit]:
        body = self._request("GET", f"/visits/{visit_id}")
        return self._envelope(body, wire.visit_from_json)

    def update_visit(
        self,
        visit_id: int,
        visited_at: datetime,
        items: Sequence[VisitItem],
        payment: Optional[Payment] = None,
        notes: Optional[str] = None,
    ) -> Envelope[Visit]:
        body = self._request(
            "PUT",
            f"/visits/{visit_id}",
            body=wire.visit_update_body(visited_at, items, payment, notes),
        )
        return self._envelope(body, wire.visit_from_json)

    def list_visits_by_pet(
        self, pet_id: int, category: Optional[VisitItemCategory] = None
    ) -> Envelope[list[Visit]]:
        params: dict[str, Any] = {"petId": pet_id}
        if category is not None:
            params["category"] = category.value
        body = self._request("GET", "/visits", params=params)
        return self._envelope(body, wire.list_of(wire.visit_from_json))

    def list_visits_by_range(self, start: datetime, end: datetime) -> Envelope[list[Visit]]:
        params = {"from": to_iso_local(start), "to": to_iso_local(end)}
        body = self._request("GET", "/visits", params=params)
        return self._envelope(body, wire.list_of(wire.visit_from_json))

    # Pet operations
    def create_pet(
        self,
        client_id: int,
        name: str,
        species: Optional[str] = None,
        size: Optional[str] = None,
        temperament: Optional[str] = None,
        weight: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> Envelope[Pet]:
        body = self._request(
            "POST",
            "/pets",
            body=wire.pet_create_body(client_id, name, species, size, temperament, weight, notes),
        )
        return self._envelope(body, wire.pet_from_json)

    def get_pet(self, pet_id: int) -> Envelope[Pet]:
        body = self._request("GET", f"/pets/{pet_id}")
        return self._envelope(body, wire.pet_from_json)

    def list_pets(self, client_id: Optional[int] = None) -> Envelope[list[Pet]]:
        params = {"clientId": client_id} if client_id is not None else None
        body = self._request("GET", "/pets", params=params)
        return self._envelope(body, wire.list_of(wire.pet_from_json))

    # Catalog operations
    def list_catalog(self, path: str) -> Envelope[list[CatalogItem]]:
        body = self._request("GET", f"/catalogs/{path}")
        return self._envelope(body, wire.list_of(wire.catalog_item_from_json))

    def create_catalog_item(self, path: str, name: str) -> Envelope[CatalogItem]:
        body = self._request("POST", f"/catalogs/{path}", body={"name": name})
        return self._envelope(body, wire.catalog_item_from_json)

    def update_catalog_item(self, path: str, item_id: int, name: str) -> Envelope[CatalogItem]:
        body = self._request("PUT", f"/catalogs/{path}/{item_id}", body={"name": name})
        return self._envelope(body, wire.catalog_item_from_json)
