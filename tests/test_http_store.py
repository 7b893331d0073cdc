"""Tests for the REST store using httpx.MockTransport."""

import json
from datetime import datetime, timedelta
from decimal import Decimal

import httpx
import pytest

from groomer.domain.appointment import AppointmentService
from groomer.domain.entities import (
    AppointmentStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    VisitItem,
    VisitItemCategory,
)
from groomer.domain.errors import (
    ConflictError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from groomer.domain.visit import VisitService
from groomer.session import SessionContext
from groomer.store.http_store import HttpStore

BASE_URL = "http://groomer.test/api/v1"

APPOINTMENT = {
    "id": 5,
    "petId": 7,
    "startAt": "2025-03-10T09:00:00",
    "endAt": "2025-03-10T09:30:00",
    "status": "PENDING",
    "notes": None,
}


class Recorder:
    """Mock handler that records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def last(self):
        return self.requests[-1]

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


def make_store(handler, token="t0ken"):
    session = SessionContext()
    if token:
        session.start(token)
    return HttpStore(BASE_URL, session=session, transport=httpx.MockTransport(handler))


def test_create_sends_force_flag_and_local_times():
    recorder = Recorder(httpx.Response(201, json={"data": APPOINTMENT}))
    store = make_store(recorder)
    result = AppointmentService(store).create_appointment(
        7, datetime(2025, 3, 10, 9, 0), datetime(2025, 3, 10, 9, 30)
    )

    request = recorder.last
    assert request.method == "POST"
    assert request.url.path == "/api/v1/appointments"
    assert request.url.params["forceOverlap"] == "false"
    assert request.headers["Authorization"] == "Bearer t0ken"
    assert recorder.body() == {
        "petId": 7,
        "startAt": "2025-03-10T09:00:00",
        "endAt": "2025-03-10T09:30:00",
        "notes": None,
    }
    assert result.data.status is AppointmentStatus.PENDING
    assert result.data.start_at == datetime(2025, 3, 10, 9, 0)


def test_conflict_then_forced_retry_with_warning():
    recorder = Recorder(
        httpx.Response(409, json={"message": "Slot already taken"}),
        httpx.Response(
            201, json={"data": APPOINTMENT, "warnings": ["Overlaps appointment 4"]}
        ),
    )
    service = AppointmentService(make_store(recorder))
    start, end = datetime(2025, 3, 10, 9, 0), datetime(2025, 3, 10, 9, 30)

    with pytest.raises(ConflictError, match="Slot already taken") as excinfo:
        service.create_appointment(7, start, end)
    assert excinfo.value.status == 409

    result = service.create_appointment(7, start, end, force_overlap=True)
    assert recorder.last.url.params["forceOverlap"] == "true"
    assert result.warnings == ("Overlaps appointment 4",)


def test_reschedule_and_edit_carry_force_flag():
    recorder = Recorder(
        httpx.Response(200, json={"data": APPOINTMENT}),
        httpx.Response(200, json={"data": APPOINTMENT}),
    )
    service = AppointmentService(make_store(recorder))
    start, end = datetime(2025, 3, 11, 9, 0), datetime(2025, 3, 11, 9, 30)

    service.reschedule_appointment(5, start, end, reason="Owner traveling", force_overlap=True)
    assert recorder.last.url.path == "/api/v1/appointments/5/reschedule"
    assert recorder.last.url.params["forceOverlap"] == "true"
    assert recorder.body()["reason"] == "Owner traveling"

    service.edit_appointment(5, start, end)
    assert recorder.last.method == "PUT"
    assert recorder.last.url.params["forceOverlap"] == "false"


def test_cancel_body():
    canceled = dict(APPOINTMENT, status="CANCELED")
    recorder = Recorder(httpx.Response(200, json={"data": canceled}))
    result = AppointmentService(make_store(recorder)).cancel_appointment(
        5, reason="No show", charge_method=PaymentMethod.CASH, charge_amount=Decimal("10.00")
    )
    assert recorder.last.url.path == "/api/v1/appointments/5/cancel"
    assert recorder.body() == {"reason": "No show", "chargeMethod": "CASH", "chargeAmount": 10.0}
    assert result.data.status is AppointmentStatus.CANCELED


def test_list_appointments_params_and_meta():
    body = {
        "data": [APPOINTMENT],
        "meta": {"page": 0, "size": 20, "totalElements": 1, "totalPages": 1},
    }
    recorder = Recorder(httpx.Response(200, json=body))
    result = AppointmentService(make_store(recorder)).list_appointments(
        datetime(2025, 3, 10), datetime(2025, 3, 16, 23, 59, 59, 999000), AppointmentStatus.PENDING
    )
    params = recorder.last.url.params
    assert params["from"] == "2025-03-10T00:00:00"
    assert params["to"] == "2025-03-16T23:59:59"
    assert params["status"] == "PENDING"
    assert result.meta.total_elements == 1
    assert len(result.data) == 1


def test_visit_create_body_and_decoding():
    visit = {
        "id": 9,
        "petId": 7,
        "petName": "Firulais",
        "appointmentId": None,
        "visitedAt": "2025-03-10T09:00:00",
        "totalAmount": 75.0,
        "items": [
            {"id": 1, "category": "BATH", "price": 35.0},
            {"id": 2, "category": "HAIRCUT", "price": 40.0},
        ],
        "payment": {"status": "PARTIAL", "method": "CARD", "amountPaid": 30.0, "balance": 45.0},
    }
    recorder = Recorder(httpx.Response(201, json={"data": visit}))
    result = VisitService(make_store(recorder)).create_visit(
        pet_id=7,
        visited_at=datetime(2025, 3, 10, 9, 0),
        items=[
            VisitItem(VisitItemCategory.BATH, Decimal("35.00")),
            VisitItem(VisitItemCategory.HAIRCUT, Decimal("40.00")),
        ],
        payment=Payment(PaymentStatus.PARTIAL, PaymentMethod.CARD, Decimal("30.00")),
        auto_create_appointment=True,
    )

    sent = recorder.body()
    assert sent["autoCreateAppointment"] is True
    assert sent["appointmentId"] is None
    assert sent["items"][0] == {"category": "BATH", "price": 35.0, "treatmentDetail": None}
    assert sent["payment"] == {"status": "PARTIAL", "method": "CARD", "amountPaid": 30.0}

    decoded = result.data
    assert decoded.total_amount == Decimal("75.0")
    assert decoded.payment.balance == Decimal("45.0")
    assert decoded.items[1].category is VisitItemCategory.HAIRCUT


def test_visit_body_omits_auto_create_when_false():
    visit = {"id": 9, "petId": 7, "visitedAt": "2025-03-10T09:00:00", "totalAmount": 0}
    recorder = Recorder(httpx.Response(201, json=visit))
    VisitService(make_store(recorder)).create_visit(
        pet_id=7, visited_at=datetime(2025, 3, 10, 9, 0), items=[]
    )
    assert "autoCreateAppointment" not in recorder.body()


def test_list_visits_by_pet_params():
    recorder = Recorder(httpx.Response(200, json={"data": []}))
    VisitService(make_store(recorder)).list_visits(pet_id=7, category=VisitItemCategory.TREATMENT)
    assert recorder.last.url.params["petId"] == "7"
    assert recorder.last.url.params["category"] == "TREATMENT"


@pytest.mark.parametrize(
    "status, error_class",
    [
        (400, ValidationError),
        (422, ValidationError),
        (403, UnauthorizedError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, TransportError),
        (503, TransportError),
    ],
)
def test_status_mapping(status, error_class):
    recorder = Recorder(httpx.Response(status, json={"message": "nope"}))
    store = make_store(recorder)
    with pytest.raises(error_class) as excinfo:
        store.get_appointment(5)
    assert excinfo.value.status == status
    assert excinfo.value.details == {"message": "nope"}
    assert f"[HTTP {status}]" in str(excinfo.value)


def test_non_json_error_uses_default_message():
    recorder = Recorder(httpx.Response(404, text="<html>missing</html>"))
    with pytest.raises(NotFoundError, match="not found"):
        make_store(recorder).get_pet(1)


def test_unauthorized_invalidates_session():
    recorder = Recorder(httpx.Response(401, json={"message": "Token expired"}))
    store = make_store(recorder)
    dropped = []
    store.session.on_invalidate(lambda s: dropped.append(True))

    with pytest.raises(UnauthorizedError, match="Token expired"):
        store.get_appointment(5)
    assert dropped == [True]
    assert not store.session.is_authenticated


def test_forbidden_keeps_session():
    recorder = Recorder(httpx.Response(403, json={"message": "Admins only"}))
    store = make_store(recorder)
    with pytest.raises(UnauthorizedError):
        store.create_catalog_item("zones", "Centro")
    assert store.session.is_authenticated


def test_timeout_is_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError, match="timed out"):
        make_store(handler).get_visit(1)


def test_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError, match="connect"):
        make_store(handler).list_pets()


def test_malformed_body_is_transport_error():
    recorder = Recorder(httpx.Response(200, text="not json"))
    with pytest.raises(TransportError, match="malformed"):
        make_store(recorder).get_pet(1)


def test_anonymous_session_sends_no_header():
    recorder = Recorder(httpx.Response(200, json={"data": []}))
    make_store(recorder, token=None).list_catalog("medicines")
    assert "Authorization" not in recorder.last.headers
    assert recorder.last.url.path == "/api/v1/catalogs/medicines"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(204),
        httpx.Response(200, json={"data": None}),
        httpx.Response(200, json={"data": dict(APPOINTMENT, status="NO_SHOW")}),
        httpx.Response(200, json={"data": {"id": 42}}),
    ],
    ids=["no-content", "null-data", "unknown-status", "missing-fields"],
)
def test_undecodable_success_is_transport_error(response):
    recorder = Recorder(response)
    service = AppointmentService(make_store(recorder))
    with pytest.raises(TransportError, match="malformed"):
        service.attend_appointment(42)


def test_null_list_payload_is_empty():
    recorder = Recorder(httpx.Response(200, json={"data": None}))
    assert make_store(recorder).list_pets().data == []


def test_blank_cancel_reason_never_reaches_store():
    recorder = Recorder()
    with pytest.raises(ValidationError):
        AppointmentService(make_store(recorder)).cancel_appointment(42, reason="   ")
    assert recorder.requests == []


def test_empty_interval_never_reaches_store():
    recorder = Recorder()
    service = AppointmentService(make_store(recorder))
    at = datetime(2025, 3, 10, 9, 0)

    with pytest.raises(ValidationError):
        service.create_appointment(7, at, at)
    with pytest.raises(ValidationError):
        service.edit_appointment(42, at, at)
    with pytest.raises(ValidationError):
        service.reschedule_appointment(42, at, at - timedelta(minutes=30), reason="Earlier")
    assert recorder.requests == []
