"""JSON encoding and decoding for the REST contract.

Field names are camelCase on the wire. Timestamps travel as naive local
``YYYY-MM-DDTHH:mm:ss`` strings and dates as ``YYYY-MM-DD``.
"""

from decimal import Decimal
from typing import Any, Callable, Optional, Sequence, TypeVar

from groomer.domain.entities import (
    Appointment,
    AppointmentStatus,
    CatalogItem,
    Envelope,
    PageMeta,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Pet,
    TreatmentDetail,
    Visit,
    VisitItem,
    VisitItemCategory,
)
from groomer.utils.time_windows import parse_iso_date, parse_iso_local, to_iso_date, to_iso_local

T = TypeVar("T")


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _number(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _enum(enum_cls, value: Any):
    if value is None:
        return None
    return enum_cls(value)


# Decoding
def meta_from_json(data: Optional[dict[str, Any]]) -> Optional[PageMeta]:
    if not data:
        return None
    return PageMeta(
        page=data.get("page"),
        size=data.get("size"),
        total_elements=data.get("totalElements"),
        total_pages=data.get("totalPages"),
        sort=data.get("sort"),
    )


def envelope_from_json(body: Any, decode: Callable[[Any], T]) -> Envelope[T]:
    """Unwrap ``{data, meta?, warnings?}``; a bare body is treated as the data."""
    if isinstance(body, dict) and "data" in body:
        payload = body.get("data")
        meta = meta_from_json(body.get("meta"))
        warnings = tuple(body.get("warnings") or ())
    else:
        payload, meta, warnings = body, None, ()
    return Envelope(data=decode(payload), meta=meta, warnings=warnings)


def list_of(decode: Callable[[dict[str, Any]], T]) -> Callable[[Any], list[T]]:
    """Lift an item decoder to a list decoder; null decodes to an empty list."""

    def decode_list(payload: Any) -> list[T]:
        return [decode(entry) for entry in (payload or [])]

    return decode_list


def appointment_from_json(data: dict[str, Any]) -> Appointment:
    return Appointment(
        id=data["id"],
        pet_id=data["petId"],
        start_at=parse_iso_local(data["startAt"]),
        end_at=parse_iso_local(data["endAt"]),
        status=AppointmentStatus(data["status"]),
        notes=data.get("notes"),
    )


def treatment_from_json(data: Optional[dict[str, Any]]) -> Optional[TreatmentDetail]:
    if not data:
        return None
    next_date = data.get("nextDate")
    return TreatmentDetail(
        treatment_type_id=data.get("treatmentTypeId"),
        treatment_type_text=data.get("treatmentTypeText"),
        medicine_id=data.get("medicineId"),
        medicine_text=data.get("medicineText"),
        next_date=parse_iso_date(next_date) if next_date else None,
    )


def item_from_json(data: dict[str, Any]) -> VisitItem:
    return VisitItem(
        id=data.get("id"),
        category=VisitItemCategory(data["category"]),
        price=_decimal(data["price"]),
        treatment_detail=treatment_from_json(data.get("treatmentDetail")),
    )


def payment_from_json(data: Optional[dict[str, Any]]) -> Optional[Payment]:
    if not data:
        return None
    return Payment(
        status=PaymentStatus(data["status"]),
        method=_enum(PaymentMethod, data.get("method")),
        amount_paid=_decimal(data.get("amountPaid")),
        balance=_decimal(data.get("balance")),
    )


def visit_from_json(data: dict[str, Any]) -> Visit:
    return Visit(
        id=data["id"],
        pet_id=data["petId"],
        pet_name=data.get("petName"),
        appointment_id=data.get("appointmentId"),
        visited_at=parse_iso_local(data["visitedAt"]),
        total_amount=_decimal(data.get("totalAmount")) or Decimal("0"),
        notes=data.get("notes"),
        items=tuple(item_from_json(item) for item in data.get("items") or ()),
        payment=payment_from_json(data.get("payment")),
    )


def pet_from_json(data: dict[str, Any]) -> Pet:
    return Pet(
        id=data["id"],
        code=data.get("code") or "",
        client_id=data["clientId"],
        name=data["name"],
        species=data.get("species"),
        size=data.get("size"),
        temperament=data.get("temperament"),
        weight=_decimal(data.get("weight")),
        notes=data.get("notes"),
        main_photo_url=data.get("mainPhotoUrl"),
    )


def catalog_item_from_json(data: dict[str, Any]) -> CatalogItem:
    return CatalogItem(
        id=data["id"],
        name=data["name"],
        normalized_name=data.get("normalizedName"),
    )


# Encoding
def appointment_create_body(pet_id: int, start_at, end_at, notes: Optional[str]) -> dict[str, Any]:
    return {
        "petId": pet_id,
        "startAt": to_iso_local(start_at),
        "endAt": to_iso_local(end_at),
        "notes": notes,
    }


def appointment_update_body(start_at, end_at, notes: Optional[str]) -> dict[str, Any]:
    return {"startAt": to_iso_local(start_at), "endAt": to_iso_local(end_at), "notes": notes}


def appointment_reschedule_body(start_at, end_at, reason: str) -> dict[str, Any]:
    return {"startAt": to_iso_local(start_at), "endAt": to_iso_local(end_at), "reason": reason}


def appointment_cancel_body(
    reason: str, charge_method: Optional[PaymentMethod], charge_amount: Optional[Decimal]
) -> dict[str, Any]:
    return {
        "reason": reason,
        "chargeMethod": charge_method.value if charge_method else None,
        "chargeAmount": _number(charge_amount),
    }


def treatment_to_json(detail: Optional[TreatmentDetail]) -> Optional[dict[str, Any]]:
    if detail is None:
        return None
    return {
        "treatmentTypeId": detail.treatment_type_id,
        "treatmentTypeText": detail.treatment_type_text,
        "medicineId": detail.medicine_id,
        "medicineText": detail.medicine_text,
        "nextDate": to_iso_date(detail.next_date) if detail.next_date else None,
    }


def item_to_json(item: VisitItem) -> dict[str, Any]:
    return {
        "category": item.category.value,
        "price": _number(item.price),
        "treatmentDetail": treatment_to_json(item.treatment_detail),
    }


def payment_to_json(payment: Optional[Payment]) -> Optional[dict[str, Any]]:
    if payment is None:
        return None
    return {
        "status": payment.status.value,
        "method": payment.method.value if payment.method else None,
        "amountPaid": _number(payment.amount_paid),
    }


def visit_update_body(
    visited_at, items: Sequence[VisitItem], payment: Optional[Payment], notes: Optional[str]
) -> dict[str, Any]:
    return {
        "visitedAt": to_iso_local(visited_at),
        "notes": notes,
        "items": [item_to_json(item) for item in items],
        "payment": payment_to_json(payment),
    }


def visit_create_body(
    pet_id: int,
    visited_at,
    items: Sequence[VisitItem],
    payment: Optional[Payment],
    notes: Optional[str],
    appointment_id: Optional[int],
    auto_create_appointment: bool,
) -> dict[str, Any]:
    body = {"petId": pet_id, "appointmentId": appointment_id}
    if auto_create_appointment:
        body["autoCreateAppointment"] = True
    body.update(visit_update_body(visited_at, items, payment, notes))
    return body


def pet_create_body(
    client_id: int,
    name: str,
    species: Optional[str],
    size: Optional[str],
    temperament: Optional[str],
    weight: Optional[Decimal],
    notes: Optional[str],
) -> dict[str, Any]:
    return {
        "clientId": client_id,
        "name": name,
        "species": species,
        "size": size,
        "temperament": temperament,
        "weight": _number(weight),
        "notes": notes,
    }
