# ============================================================================
# FILE: salonbook/api/v1/public/booking.py
# Online booking page endpoints - no authentication
# ============================================================================
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from datetime import date, time
from typing import Optional, List
from uuid import UUID

from salonbook.api.dependencies import get_booking_service, get_booking_store, get_business_context
from salonbook.core.context import BusinessContext
from salonbook.schemas.booking import BookingRequest, BookingResult, CustomerInfo
from salonbook.services.appointment.booking_service import BookingService
from salonbook.services.availability.availability_service import AvailabilityService
from salonbook.services.persistence.booking_store import BookingStore

router = APIRouter(prefix="/public/{business_id}", tags=["public-booking"])


class AvailabilityResponse(BaseModel):
    appointment_date: date
    staff_id: Optional[UUID] = None
    all_slots: List[str]
    occupied_slots: List[str]
    free_slots: List[str]


class PublicBookingRequest(BaseModel):
    """Online booking form; always creates a new customer row"""
    service_ids: List[UUID] = Field(default_factory=list)
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    staff_id: Optional[UUID] = Field(None, description="Leave empty for any available staff")
    customer: Optional[CustomerInfo] = None


@router.get("/availability", response_model=AvailabilityResponse)
def get_availability(
        appointment_date: date = Query(..., alias="date", description="Day to show slots for"),
        staff_id: Optional[UUID] = Query(None, description="Only mark this staff member's bookings"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    """
    Get the bookable time slots of a day.
    Occupied slots are only computed when a staff member is selected.
    """
    availability = AvailabilityService.compute_availability(ctx, store, appointment_date, staff_id)

    return AvailabilityResponse(
        appointment_date=availability.appointment_date,
        staff_id=availability.staff_id,
        all_slots=availability.all_slots,
        occupied_slots=availability.occupied_slots,
        free_slots=availability.free_slots,
    )


@router.post("/bookings", response_model=BookingResult, status_code=201)
def create_booking(
        booking: PublicBookingRequest,
        ctx: BusinessContext = Depends(get_business_context),
        booking_service: BookingService = Depends(get_booking_service)
):
    """
    Book one or more services for a single visit.
    Sends the salon alert and the customer confirmation SMS in the background.
    """
    request = BookingRequest(
        service_ids=booking.service_ids,
        appointment_date=booking.appointment_date,
        start_time=booking.start_time,
        staff_id=booking.staff_id,
        customer=booking.customer,
        notes=booking.customer.notes if booking.customer else None,
    )
    return booking_service.create_booking(ctx, request)
