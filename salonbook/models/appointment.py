# salonbook/models/appointment.py
from sqlalchemy import (
    Column, String, Text, Date, Time, Numeric, DateTime, ForeignKey, Index, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum

from salonbook.models.base import Base


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states shared by every row of an appointment group."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"  # legacy rows only, no transition leads here
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that keep a staff member busy for new bookings
BLOCKING_STATUSES = [
    AppointmentStatus.SCHEDULED.value,
    AppointmentStatus.CONFIRMED.value,
    AppointmentStatus.IN_PROGRESS.value,
]


class Appointment(Base):
    """One service line of a customer visit; siblings share appointment_group_id"""
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("appointment_group_id", "service_id", name="uq_appointments_group_service"),
        Index("ix_appointments_business_date", "business_id", "appointment_date"),
        Index("ix_appointments_staff_date", "staff_id", "appointment_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    appointment_group_id = Column(Uuid, nullable=True, index=True)

    # Appointment details
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)  # this line's service price
    notes = Column(Text, nullable=True)

    status = Column(String(20), default=AppointmentStatus.SCHEDULED.value, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="appointments")
    service = relationship("Service")
    staff = relationship("Staff")
    payments = relationship(
        "Payment",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="Payment.created_at",
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, group={self.appointment_group_id}, status={self.status})>"
