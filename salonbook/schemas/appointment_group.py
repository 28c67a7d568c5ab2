# salonbook/schemas/appointment_group.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from decimal import Decimal
from uuid import UUID

from salonbook.models.payment import PaymentMethod
from salonbook.schemas.records import CustomerRecord, StaffRecord, PaymentRecord


class GroupedService(BaseModel):
    name: str
    duration_minutes: int
    price: Decimal


class AppointmentGroup(BaseModel):
    """One customer visit rebuilt from its appointment rows"""
    appointment_group_id: UUID
    appointment_date: date
    start_time: str
    end_time: str
    status: str
    total_price: Decimal
    notes: Optional[str] = None
    customer: Optional[CustomerRecord] = None
    staff: Optional[StaffRecord] = None
    services: List[GroupedService] = Field(default_factory=list)
    appointment_ids: List[UUID] = Field(default_factory=list)
    payments: List[PaymentRecord] = Field(default_factory=list)

    @property
    def total_duration(self) -> int:
        return sum(service.duration_minutes for service in self.services)

    @property
    def amount_paid(self) -> Decimal:
        return sum(
            (payment.amount for payment in self.payments if payment.payment_status == "completed"),
            Decimal("0"),
        )


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="confirmed, completed, cancelled or no_show")


class TransitionResult(BaseModel):
    appointment_group_id: UUID
    previous_status: str
    new_status: str
    appointment_ids: List[UUID]
    payment_required: bool = False


class PaymentRequest(BaseModel):
    """Payment captured after completing a visit"""
    payment_method: PaymentMethod
    amount: Optional[Decimal] = Field(None, ge=0, description="Defaults to the group total")
    expected_payment_date: Optional[date] = Field(None, description="Only kept for credit payments")
    notes: Optional[str] = None
