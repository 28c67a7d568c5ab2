# salonbook/schemas/booking.py
"""
Request/response schemas for availability and booking.
Required-field checks live in BookingService so they raise the domain
ValidationError before any I/O; the schemas only shape the data.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, time
from decimal import Decimal
from uuid import UUID


class CustomerInfo(BaseModel):
    """Contact details for a customer booking online"""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: Optional[str] = None
    notes: Optional[str] = None


class BookingRequest(BaseModel):
    """A finalized selection to persist as one appointment group"""
    service_ids: List[UUID] = Field(default_factory=list)
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    staff_id: Optional[UUID] = Field(None, description="None means any available staff")

    # Either a new customer's details (public booking) or an existing customer (dashboard)
    customer: Optional[CustomerInfo] = None
    customer_id: Optional[UUID] = None

    notes: Optional[str] = None


class BookingResult(BaseModel):
    group_id: UUID
    customer_id: UUID
    appointment_ids: List[UUID]
    staff_id: Optional[UUID] = None
    appointment_date: date
    start_time: str
    end_time: str
    total_price: Decimal
    total_duration: int


class Availability(BaseModel):
    """Bookable slots for one day, ascending HH:MM strings"""
    appointment_date: date
    staff_id: Optional[UUID] = None
    all_slots: List[str] = Field(default_factory=list)
    occupied_slots: List[str] = Field(default_factory=list)

    @property
    def free_slots(self) -> List[str]:
        occupied = set(self.occupied_slots)
        return [slot for slot in self.all_slots if slot not in occupied]
