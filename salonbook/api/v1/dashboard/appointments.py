# ============================================================================
# FILE: salonbook/api/v1/dashboard/appointments.py
# Salon dashboard endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from pydantic import BaseModel, Field
from datetime import date, time
from typing import Optional, List
from uuid import UUID

from salonbook.api.dependencies import get_booking_service, get_booking_store, get_business_context
from salonbook.core.context import BusinessContext
from salonbook.schemas.appointment_group import (
    AppointmentGroup,
    PaymentRequest,
    StatusUpdateRequest,
    TransitionResult,
)
from salonbook.schemas.booking import BookingRequest, BookingResult
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService
from salonbook.services.appointment.booking_service import BookingService
from salonbook.services.appointment.status_service import StatusService
from salonbook.services.payment.payment_service import PaymentService
from salonbook.services.persistence.booking_store import BookingStore

router = APIRouter(prefix="/dashboard/{business_id}/appointments", tags=["dashboard-appointments"])


class DashboardBookingRequest(BaseModel):
    """Appointment created by salon staff for an existing customer"""
    customer_id: UUID
    service_ids: List[UUID] = Field(default_factory=list)
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    staff_id: Optional[UUID] = None
    notes: Optional[str] = None


class RescheduleRequest(BaseModel):
    """New services, time or staff for an existing visit; customer and notes are kept unless given"""
    service_ids: List[UUID] = Field(default_factory=list)
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    staff_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    payment_id: UUID
    appointment_group_id: UUID


@router.get("", response_model=List[AppointmentGroup])
def list_appointments(
        appointment_date: Optional[date] = Query(None, alias="date", description="Only this day"),
        status: Optional[str] = Query(None,
                                      description="Filter by status (scheduled, confirmed, completed, cancelled, no_show)"),
        staff_id: Optional[UUID] = Query(None, description="Only this staff member"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    """
    Get the business's appointments, one entry per visit.
    """
    return AppointmentGroupService.list_grouped_appointments(
        ctx,
        store,
        appointment_date=appointment_date,
        status=status,
        staff_id=staff_id
    )


@router.post("", response_model=BookingResult, status_code=201)
def create_appointment(
        booking: DashboardBookingRequest,
        ctx: BusinessContext = Depends(get_business_context),
        booking_service: BookingService = Depends(get_booking_service)
):
    """
    Create an appointment group for an existing customer.
    No SMS is sent for bookings made from the dashboard.
    """
    request = BookingRequest(**booking.model_dump())
    return booking_service.create_booking(ctx, request, send_notifications=False)


@router.get("/{group_id}", response_model=AppointmentGroup)
def get_appointment(
        group_id: UUID = Path(..., description="The appointment group ID"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    return AppointmentGroupService.get_group(ctx, store, group_id)


@router.put("/{group_id}", response_model=BookingResult)
def reschedule_appointment(
        changes: RescheduleRequest,
        group_id: UUID = Path(..., description="The appointment group ID"),
        ctx: BusinessContext = Depends(get_business_context),
        booking_service: BookingService = Depends(get_booking_service)
):
    """
    Edit a visit: its services, date, start time or staff.
    The visit keeps its status and payments.
    """
    request = BookingRequest(**changes.model_dump())
    return booking_service.reschedule_group(ctx, group_id, request)


@router.post("/{group_id}/status", response_model=TransitionResult)
def update_status(
        update: StatusUpdateRequest,
        group_id: UUID = Path(..., description="The appointment group ID"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    """
    Change the status of every service in the visit.
    When `payment_required` is true the client should open payment capture.
    """
    return StatusService.transition_status(ctx, store, group_id, update.status)


@router.post("/{group_id}/payment", response_model=PaymentResponse, status_code=201)
def record_payment(
        payment: PaymentRequest,
        group_id: UUID = Path(..., description="The appointment group ID"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    """
    Record the payment for a completed visit.
    Credit payments are stored as pending with their expected payment date.
    """
    payment_id = PaymentService.record_payment(ctx, store, group_id, payment)
    return PaymentResponse(payment_id=payment_id, appointment_group_id=group_id)


@router.put("/{group_id}/payment", response_model=PaymentResponse)
def edit_payment(
        payment: PaymentRequest,
        group_id: UUID = Path(..., description="The appointment group ID"),
        ctx: BusinessContext = Depends(get_business_context),
        store: BookingStore = Depends(get_booking_store)
):
    """
    Replace the payment of a completed visit without changing its status.
    """
    payment_id = PaymentService.edit_payment(ctx, store, group_id, payment)
    return PaymentResponse(payment_id=payment_id, appointment_group_id=group_id)
