"""SQLAlchemy models for the local groomer store."""

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Pet(Base):
    """Pet model. Clients live outside this store; only their id is kept."""

    __tablename__ = "pets"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=True)
    client_id = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    species = Column(String, nullable=True)
    size = Column(String, nullable=True)
    temperament = Column(String, nullable=True)
    weight = Column(Numeric(6, 2), nullable=True)
    notes = Column(String, nullable=True)
    main_photo_url = Column(String, nullable=True)

    # Relationships
    appointments = relationship("Appointment", back_populates="pet")
    visits = relationship("Visit", back_populates="pet")


class Appointment(Base):
    """Appointment model. Timestamps are naive local time."""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="PENDING")
    notes = Column(String, nullable=True)

    __table_args__ = (Index("ix_appointments_interval", "start_at", "end_at"),)

    # Relationships
    pet = relationship("Pet", back_populates="appointments")
    events = relationship(
        "AppointmentEvent",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="AppointmentEvent.id",
    )


class AppointmentEvent(Base):
    """Audit trail of reschedules and cancellations."""

    __tablename__ = "appointment_events"

    id = Column(Integer, primary_key=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False)
    kind = Column(String, nullable=False)
    reason = Column(String, nullable=True)
    previous_start_at = Column(DateTime, nullable=True)
    previous_end_at = Column(DateTime, nullable=True)
    charge_method = Column(String, nullable=True)
    charge_amount = Column(Numeric(10, 2), nullable=True)
    forced = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    # Relationships
    appointment = relationship("Appointment", back_populates="events")


class Visit(Base):
    """Visit model."""

    __tablename__ = "visits"

    id = Column(Integer, primary_key=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    visited_at = Column(DateTime, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(String, nullable=True)

    # Relationships
    pet = relationship("Pet", back_populates="visits")
    items = relationship(
        "VisitItem",
        back_populates="visit",
        cascade="all, delete-orphan",
        order_by="VisitItem.position",
    )
    payment = relationship(
        "Payment", back_populates="visit", uselist=False, cascade="all, delete-orphan"
    )


class VisitItem(Base):
    """Visit item model with its optional treatment detail flattened in."""

    __tablename__ = "visit_items"

    id = Column(Integer, primary_key=True)
    visit_id = Column(Integer, ForeignKey("visits.id"), nullable=False)
    position = Column(Integer, nullable=False)
    category = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    has_treatment = Column(Boolean, default=False, nullable=False)
    treatment_type_id = Column(Integer, ForeignKey("catalog_entries.id"), nullable=True)
    treatment_type_text = Column(String, nullable=True)
    medicine_id = Column(Integer, ForeignKey("catalog_entries.id"), nullable=True)
    medicine_text = Column(String, nullable=True)
    next_date = Column(Date, nullable=True)

    # Relationships
    visit = relationship("Visit", back_populates="items")


class Payment(Base):
    """Payment model, at most one per visit."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    visit_id = Column(Integer, ForeignKey("visits.id"), nullable=False, unique=True)
    status = Column(String, nullable=False)
    method = Column(String, nullable=True)
    amount_paid = Column(Numeric(10, 2), nullable=True)
    balance = Column(Numeric(10, 2), nullable=False, default=0)

    # Relationships
    visit = relationship("Visit", back_populates="payment")


class CatalogEntry(Base):
    """Entry of a named catalog; ``catalog`` is the resource path."""

    __tablename__ = "catalog_entries"

    id = Column(Integer, primary_key=True)
    catalog = Column(String, nullable=False)
    name = Column(String, nullable=False)
    normalized_name = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("catalog", "normalized_name", name="uq_catalog_normalized_name"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
