"""Mapper functions to convert SQLAlchemy rows into domain entities."""

from decimal import Decimal

from groomer.domain import entities as domain
from groomer.store.models import (
    Appointment as ORMAppointment,
    CatalogEntry as ORMCatalogEntry,
    Payment as ORMPayment,
    Pet as ORMPet,
    Visit as ORMVisit,
    VisitItem as ORMVisitItem,
)


def appointment_to_domain(orm_appointment: ORMAppointment) -> domain.Appointment:
    """Convert SQLAlchemy Appointment model to domain Appointment entity."""
    return domain.Appointment(
        id=orm_appointment.id,
        pet_id=orm_appointment.pet_id,
        start_at=orm_appointment.start_at,
        end_at=orm_appointment.end_at,
        status=domain.AppointmentStatus(orm_appointment.status),
        notes=orm_appointment.notes,
    )


def visit_item_to_domain(orm_item: ORMVisitItem) -> domain.VisitItem:
    """Convert SQLAlchemy VisitItem model to domain VisitItem entity."""
    detail = None
    if orm_item.has_treatment:
        detail = domain.TreatmentDetail(
            treatment_type_id=orm_item.treatment_type_id,
            treatment_type_text=orm_item.treatment_type_text,
            medicine_id=orm_item.medicine_id,
            medicine_text=orm_item.medicine_text,
            next_date=orm_item.next_date,
        )
    return domain.VisitItem(
        id=orm_item.id,
        category=domain.VisitItemCategory(orm_item.category),
        price=Decimal(orm_item.price),
        treatment_detail=detail,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        status=domain.PaymentStatus(orm_payment.status),
        method=domain.PaymentMethod(orm_payment.method) if orm_payment.method else None,
        amount_paid=Decimal(orm_payment.amount_paid) if orm_payment.amount_paid is not None else None,
        balance=Decimal(orm_payment.balance),
    )


def visit_to_domain(orm_visit: ORMVisit) -> domain.Visit:
    """Convert SQLAlchemy Visit model to domain Visit entity."""
    return domain.Visit(
        id=orm_visit.id,
        pet_id=orm_visit.pet_id,
        pet_name=orm_visit.pet.name if orm_visit.pet is not None else None,
        appointment_id=orm_visit.appointment_id,
        visited_at=orm_visit.visited_at,
        total_amount=Decimal(orm_visit.total_amount),
        notes=orm_visit.notes,
        items=tuple(visit_item_to_domain(item) for item in orm_visit.items),
        payment=payment_to_domain(orm_visit.payment) if orm_visit.payment is not None else None,
    )


def pet_to_domain(orm_pet: ORMPet) -> domain.Pet:
    """Convert SQLAlchemy Pet model to domain Pet entity."""
    return domain.Pet(
        id=orm_pet.id,
        code=orm_pet.code or "",
        client_id=orm_pet.client_id,
        name=orm_pet.name,
        species=orm_pet.species,
        size=orm_pet.size,
        temperament=orm_pet.temperament,
        weight=Decimal(orm_pet.weight) if orm_pet.weight is not None else None,
        notes=orm_pet.notes,
        main_photo_url=orm_pet.main_photo_url,
    )


def catalog_entry_to_domain(orm_entry: ORMCatalogEntry) -> domain.CatalogItem:
    """Convert SQLAlchemy CatalogEntry model to domain CatalogItem entity."""
    return domain.CatalogItem(
        id=orm_entry.id,
        name=orm_entry.name,
        normalized_name=orm_entry.normalized_name,
    )
