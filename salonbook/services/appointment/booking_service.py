# ============================================================================
# salonbook/services/appointment/booking_service.py
# Single entry point for creating and rescheduling appointment groups
# ============================================================================
"""Service for turning a customer's selection into one appointment group"""
import logging
import random
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import AvailabilityConflictError, ValidationError
from salonbook.models.appointment import BLOCKING_STATUSES, AppointmentStatus
from salonbook.schemas.booking import BookingRequest, BookingResult
from salonbook.schemas.records import AppointmentFilter, AppointmentInsert, CustomerCreate, ServiceRecord
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService
from salonbook.utils.time_utils import (
    MINUTES_PER_DAY,
    format_minutes,
    intervals_overlap,
    minutes_to_time,
    to_minutes,
)

logger = logging.getLogger(__name__)


class BookingService:
    """Validates a booking, prices it, assigns staff and persists it atomically.

    Public booking, the dashboard and the staff dashboard all create
    appointments through this class.
    """

    def __init__(self, store, notifier=None, rng: Optional[random.Random] = None):
        self.store = store
        self.notifier = notifier
        self.rng = rng or random.Random()

    def create_booking(
            self,
            ctx: BusinessContext,
            request: BookingRequest,
            send_notifications: bool = True
    ) -> BookingResult:
        """Create one appointment row per selected service under a fresh group id.

        A new customer is written in the same transaction as the rows.

        Raises:
            ValidationError: a precondition failed (nothing was written)
            AvailabilityConflictError: the staff member got booked meanwhile
            PersistenceError: the database write failed (nothing was written)
        """
        self.validate_request(request)

        services, start_minutes, end_minutes = self._schedule(ctx, request)
        staff_id = self.resolve_staff(
            ctx,
            request.staff_id,
            appointment_date=request.appointment_date,
            start_minutes=start_minutes,
            end_minutes=end_minutes,
        )
        customer_id, new_customer = self._resolve_customer(ctx, request)

        group_id = uuid.uuid4()
        rows = self._build_rows(
            ctx, group_id, request, services, customer_id, staff_id,
            start_minutes, end_minutes, AppointmentStatus.SCHEDULED.value, request.notes
        )

        inserted = self.store.insert_appointment_group(ctx, rows, new_customer=new_customer)
        logger.info(
            f"Booked group {group_id} for business {ctx}: {len(rows)} services, "
            f"{request.appointment_date} {format_minutes(start_minutes)}-{format_minutes(end_minutes)}"
        )

        if send_notifications:
            self._notify(ctx, group_id)

        return self._result(inserted, customer_id, staff_id, request.appointment_date,
                            services, start_minutes, end_minutes)

    def reschedule_group(
            self,
            ctx: BusinessContext,
            group_id: UUID,
            request: BookingRequest
    ) -> BookingResult:
        """Change the services, staff, date or start time of an existing group.

        The group keeps its id, status and payments; the customer and notes
        default to the group's own. All rows are swapped in one transaction.

        Raises:
            ValidationError: a precondition failed (nothing was written)
            AppointmentGroupNotFoundError: no rows for group_id
            AvailabilityConflictError: the new window overlaps another booking
            PersistenceError: the database write failed (the old rows are kept)
        """
        self.validate_schedule(request)

        group = AppointmentGroupService.get_group(ctx, self.store, group_id)

        customer_id = request.customer_id or (group.customer.id if group.customer else None)
        if not customer_id:
            raise ValidationError("Select a customer", field="customer_id")
        if request.customer_id and not self.store.get_customer(ctx, request.customer_id):
            raise ValidationError("Customer not found", field="customer_id")

        services, start_minutes, end_minutes = self._schedule(ctx, request)
        staff_id = self.resolve_staff(
            ctx,
            request.staff_id,
            appointment_date=request.appointment_date,
            start_minutes=start_minutes,
            end_minutes=end_minutes,
            exclude_group_id=group_id,
        )

        notes = group.notes if request.notes is None else request.notes
        rows = self._build_rows(
            ctx, group_id, request, services, customer_id, staff_id,
            start_minutes, end_minutes, group.status, notes
        )

        replaced = self.store.replace_appointment_group(ctx, group_id, rows)
        logger.info(
            f"Rescheduled group {group_id} for business {ctx} to "
            f"{request.appointment_date} {format_minutes(start_minutes)}-{format_minutes(end_minutes)}"
        )

        return self._result(replaced, customer_id, staff_id, request.appointment_date,
                            services, start_minutes, end_minutes)

    @staticmethod
    def validate_schedule(request: BookingRequest) -> None:
        if not request.service_ids:
            raise ValidationError("Select at least one service", field="service_ids")
        if not request.appointment_date:
            raise ValidationError("Select a date", field="appointment_date")
        if not request.start_time:
            raise ValidationError("Select a start time", field="start_time")

    @staticmethod
    def validate_request(request: BookingRequest) -> None:
        """Fail fast on missing selections or contact details"""
        BookingService.validate_schedule(request)

        if request.customer_id:
            return

        customer = request.customer
        if not customer:
            raise ValidationError("Customer details are required", field="customer")
        for field in ("first_name", "last_name", "phone"):
            if not (getattr(customer, field) or "").strip():
                raise ValidationError(f"Customer {field.replace('_', ' ')} is required", field=field)

    def resolve_staff(
            self,
            ctx: BusinessContext,
            requested_staff_id: Optional[UUID],
            appointment_date: Optional[date] = None,
            start_minutes: Optional[int] = None,
            end_minutes: Optional[int] = None,
            exclude_group_id: Optional[UUID] = None
    ) -> Optional[UUID]:
        """Use the chosen staff member, else pick one at random.

        With a window given, the random pick only draws from active staff who
        have no blocking booking overlapping it.
        """
        active_staff = self.store.get_active_staff(ctx)

        if requested_staff_id:
            if not any(member.id == requested_staff_id for member in active_staff):
                raise ValidationError("Selected staff member is not available", field="staff_id")
            return requested_staff_id

        if not active_staff:
            return None

        candidates = active_staff
        if appointment_date is not None:
            busy = self._busy_staff(ctx, appointment_date, start_minutes, end_minutes, exclude_group_id)
            candidates = [member for member in active_staff if member.id not in busy]
            if not candidates:
                raise AvailabilityConflictError(
                    "No staff member is free at this time, please choose another one"
                )

        return self.rng.choice(candidates).id

    def _busy_staff(
            self,
            ctx: BusinessContext,
            appointment_date: date,
            start_minutes: int,
            end_minutes: int,
            exclude_group_id: Optional[UUID]
    ) -> set:
        bookings = self.store.get_appointments(
            ctx,
            AppointmentFilter(appointment_date=appointment_date, status_in=BLOCKING_STATUSES)
        )
        return {
            booking.staff_id
            for booking in bookings
            if booking.staff_id
            and not (exclude_group_id and booking.appointment_group_id == exclude_group_id)
            and intervals_overlap(start_minutes, end_minutes,
                                  to_minutes(booking.start_time), to_minutes(booking.end_time))
        }

    def _schedule(self, ctx: BusinessContext, request: BookingRequest) -> Tuple[List[ServiceRecord], int, int]:
        """Load the services and place them back to back from the start time"""
        services = self._load_services(ctx, list(dict.fromkeys(request.service_ids)))

        start_minutes = to_minutes(request.start_time)
        end_minutes = start_minutes + sum(service.duration_minutes for service in services)
        if end_minutes >= MINUTES_PER_DAY:
            raise ValidationError(
                f"Appointment would end at {format_minutes(end_minutes)}, past midnight",
                field="start_time"
            )

        return services, start_minutes, end_minutes

    def _load_services(self, ctx: BusinessContext, service_ids: List[UUID]) -> List[ServiceRecord]:
        by_id = {service.id: service for service in self.store.get_services(ctx, service_ids)}

        services = []
        for service_id in service_ids:
            service = by_id.get(service_id)
            if not service or not service.is_active:
                raise ValidationError(f"Service {service_id} is not available", field="service_ids")
            services.append(service)

        return services

    def _resolve_customer(
            self,
            ctx: BusinessContext,
            request: BookingRequest
    ) -> Tuple[UUID, Optional[CustomerCreate]]:
        """Existing customer id, or a new customer to write with the booking"""
        if request.customer_id:
            if not self.store.get_customer(ctx, request.customer_id):
                raise ValidationError("Customer not found", field="customer_id")
            return request.customer_id, None

        customer = request.customer
        new_customer = CustomerCreate(
            id=uuid.uuid4(),
            first_name=customer.first_name.strip(),
            last_name=customer.last_name.strip(),
            phone=customer.phone.strip(),
            email=customer.email or None,
            notes=customer.notes or None,
        )
        return new_customer.id, new_customer

    @staticmethod
    def _build_rows(
            ctx: BusinessContext,
            group_id: UUID,
            request: BookingRequest,
            services: List[ServiceRecord],
            customer_id: UUID,
            staff_id: Optional[UUID],
            start_minutes: int,
            end_minutes: int,
            status: str,
            notes: Optional[str]
    ) -> List[AppointmentInsert]:
        return [
            AppointmentInsert(
                business_id=ctx.business_id,
                customer_id=customer_id,
                service_id=service.id,
                staff_id=staff_id,
                appointment_group_id=group_id,
                appointment_date=request.appointment_date,
                start_time=minutes_to_time(start_minutes),
                end_time=minutes_to_time(end_minutes),
                status=status,
                total_price=service.price,
                notes=notes,
            )
            for service in services
        ]

    @staticmethod
    def _result(inserted, customer_id, staff_id, appointment_date, services, start_minutes, end_minutes):
        return BookingResult(
            group_id=inserted.group_id,
            customer_id=customer_id,
            appointment_ids=inserted.inserted_ids,
            staff_id=staff_id,
            appointment_date=appointment_date,
            start_time=format_minutes(start_minutes),
            end_time=format_minutes(end_minutes),
            total_price=sum((service.price for service in services), Decimal("0")),
            total_duration=end_minutes - start_minutes,
        )

    def _notify(self, ctx: BusinessContext, group_id: UUID) -> None:
        if not self.notifier:
            return

        for notify in (self.notifier.notify_business_of_new_booking, self.notifier.notify_customer_confirmation):
            try:
                notify(ctx, group_id)
            except Exception as e:
                logger.warning(f"Notification for group {group_id} failed: {e}")
