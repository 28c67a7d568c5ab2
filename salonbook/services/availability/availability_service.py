# ===== salonbook/services/availability/availability_service.py =====
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from salonbook.config.settings import get_settings
from salonbook.core.context import BusinessContext
from salonbook.models.appointment import AppointmentStatus
from salonbook.schemas.booking import Availability
from salonbook.schemas.records import AppointmentFilter, AppointmentRecord, WorkingHoursRecord
from salonbook.utils.time_utils import format_minutes, intervals_overlap, to_minutes

logger = logging.getLogger(__name__)

# Bookings that make a slot show as taken
OCCUPYING_STATUSES = [
    AppointmentStatus.SCHEDULED.value,
    AppointmentStatus.IN_PROGRESS.value,
]


def sunday_based_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday, independent of locale"""
    return (day.weekday() + 1) % 7


class AvailabilityService:
    """Computes the bookable 30-minute slots of a day"""

    @staticmethod
    def compute_availability(
            ctx: BusinessContext,
            store,
            appointment_date: date,
            staff_id: Optional[UUID] = None,
            slot_interval_minutes: Optional[int] = None
    ) -> Availability:
        """
        Generate the day's slots from the business working hours and, when a
        staff member is chosen, mark the slots overlapping their bookings.

        Lookup failures degrade to an empty result so callers always get a
        defined state. Without a staff member occupancy is never computed.
        """
        interval = slot_interval_minutes or get_settings().SLOT_INTERVAL_MINUTES
        empty = Availability(appointment_date=appointment_date, staff_id=staff_id)

        try:
            working_hours = store.get_working_hours(ctx)
        except Exception as e:
            logger.error(f"Working hours lookup failed for business {ctx}: {e}")
            return empty

        day_rule = AvailabilityService.find_day_rule(working_hours, appointment_date)
        if not day_rule or day_rule.is_closed:
            logger.debug(f"Business {ctx} is closed on {appointment_date}")
            return empty

        slots = AvailabilityService.generate_time_slots(day_rule, interval)

        occupied: List[str] = []
        if staff_id:
            try:
                bookings = store.get_appointments(
                    ctx,
                    AppointmentFilter(
                        staff_id=staff_id,
                        appointment_date=appointment_date,
                        status_in=OCCUPYING_STATUSES,
                    )
                )
            except Exception as e:
                logger.error(f"Appointment lookup failed for staff {staff_id} on {appointment_date}: {e}")
                return empty

            occupied = AvailabilityService.find_occupied_slots(slots, bookings, interval)

        return Availability(
            appointment_date=appointment_date,
            staff_id=staff_id,
            all_slots=slots,
            occupied_slots=occupied,
        )

    @staticmethod
    def find_day_rule(
            working_hours: List[WorkingHoursRecord],
            appointment_date: date
    ) -> Optional[WorkingHoursRecord]:
        day_of_week = sunday_based_weekday(appointment_date)
        return next((wh for wh in working_hours if wh.day_of_week == day_of_week), None)

    @staticmethod
    def generate_time_slots(day_rule: WorkingHoursRecord, interval_minutes: int = 30) -> List[str]:
        """HH:MM slots from opening (inclusive) to closing (exclusive).

        The grid is fixed; a long service is not checked against closing time.
        """
        slots = []
        current = to_minutes(day_rule.start_time)
        day_end = to_minutes(day_rule.end_time)

        while current < day_end:
            slots.append(format_minutes(current))
            current += interval_minutes

        return slots

    @staticmethod
    def find_occupied_slots(
            slots: List[str],
            bookings: List[AppointmentRecord],
            interval_minutes: int = 30
    ) -> List[str]:
        """Slots whose [slot, slot + interval) overlaps any booking window"""
        windows = [(to_minutes(b.start_time), to_minutes(b.end_time)) for b in bookings]

        occupied = []
        for slot in slots:
            slot_start = to_minutes(slot)
            slot_end = slot_start + interval_minutes
            if any(intervals_overlap(slot_start, slot_end, start, end) for start, end in windows):
                occupied.append(slot)

        return occupied
