# salonbook/schemas/records.py
"""
Plain records exchanged with the persistence layer.
The store converts ORM rows into these so scheduling logic never touches a Session.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import date, time, datetime
from decimal import Decimal
from uuid import UUID


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class WorkingHoursRecord(_Record):
    business_id: UUID
    staff_id: Optional[UUID] = None
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    start_time: time
    end_time: time
    is_closed: bool = False


class ServiceRecord(_Record):
    id: UUID
    name: str
    price: Decimal = Field(..., ge=0)
    duration_minutes: int = Field(..., gt=0)
    is_active: bool = True


class StaffRecord(_Record):
    id: UUID
    name: str
    is_active: bool = True
    specialties: Optional[List[str]] = None


class CustomerRecord(_Record):
    id: UUID
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None


class PaymentRecord(_Record):
    id: Optional[UUID] = None
    appointment_id: UUID
    amount: Decimal
    payment_method: str
    payment_status: str
    payment_date: Optional[datetime] = None
    expected_payment_date: Optional[date] = None
    notes: Optional[str] = None


class AppointmentRecord(_Record):
    """One appointment row joined with its customer, service, staff and payments"""
    id: UUID
    business_id: UUID
    appointment_group_id: Optional[UUID] = None
    customer_id: UUID
    service_id: UUID
    staff_id: Optional[UUID] = None
    appointment_date: date
    start_time: time
    end_time: time
    status: str
    total_price: Decimal
    notes: Optional[str] = None

    customer: Optional[CustomerRecord] = None
    service: Optional[ServiceRecord] = None
    staff: Optional[StaffRecord] = None
    payments: List[PaymentRecord] = Field(default_factory=list)


class AppointmentFilter(BaseModel):
    """Filters for reading appointment rows of one business"""
    staff_id: Optional[UUID] = None
    appointment_date: Optional[date] = None
    status_in: Optional[List[str]] = None
    appointment_group_id: Optional[UUID] = None


class AppointmentInsert(BaseModel):
    business_id: UUID
    customer_id: UUID
    service_id: UUID
    staff_id: Optional[UUID] = None
    appointment_group_id: UUID
    appointment_date: date
    start_time: time
    end_time: time
    status: str
    total_price: Decimal
    notes: Optional[str] = None


class AppointmentGroupInsertResult(BaseModel):
    group_id: UUID
    inserted_ids: List[UUID]


class CustomerCreate(BaseModel):
    """New customer; `id` is preset when the row is written together with its booking"""
    id: Optional[UUID] = None
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None
    notes: Optional[str] = None


class PaymentInsert(BaseModel):
    appointment_id: UUID
    amount: Decimal
    payment_method: str
    payment_status: str
    payment_date: Optional[datetime] = None
    expected_payment_date: Optional[date] = None
    notes: Optional[str] = None
