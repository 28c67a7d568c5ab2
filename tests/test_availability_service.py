from datetime import date

import pytest

from conftest import MONDAY, SUNDAY
from salonbook.services.availability.availability_service import (
    AvailabilityService,
    sunday_based_weekday,
)

NINE_TO_ONE = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00", "12:30"]


@pytest.mark.parametrize("day, expected", [
    (SUNDAY, 0),
    (MONDAY, 1),
    (date(2026, 10, 24), 6),
])
def test_sunday_based_weekday(day, expected):
    assert sunday_based_weekday(day) == expected


def test_slots_cover_opening_hours_with_exclusive_end(ctx, store):
    store.add_working_hours(1, "09:00", "13:00")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert availability.all_slots == NINE_TO_ONE
    assert availability.occupied_slots == []


def test_slot_grid_is_the_same_on_every_call(ctx, store):
    store.add_working_hours(1, "09:00", "13:00")

    first = AvailabilityService.compute_availability(ctx, store, MONDAY)
    second = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert first.all_slots == second.all_slots


def test_odd_closing_time_keeps_last_started_slot(ctx, store):
    store.add_working_hours(1, "09:00", "10:15")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert availability.all_slots == ["09:00", "09:30", "10:00"]


def test_closed_day_has_no_slots(ctx, store):
    store.add_working_hours(0, is_closed=True)

    availability = AvailabilityService.compute_availability(ctx, store, SUNDAY)

    assert availability.all_slots == []
    assert availability.occupied_slots == []


def test_day_without_working_hours_has_no_slots(ctx, store):
    store.add_working_hours(2)

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert availability.all_slots == []


def test_occupied_slots_follow_half_open_overlap(ctx, store):
    staff = store.add_staff("Elif")
    store.add_working_hours(1, "09:00", "13:00")
    store.add_appointment("10:00", "10:45", staff_id=staff.id)

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY, staff.id)

    assert availability.occupied_slots == ["10:00", "10:30"]
    assert "09:30" in availability.free_slots
    assert "11:00" in availability.free_slots


def test_only_active_statuses_occupy_slots(ctx, store):
    staff = store.add_staff("Elif")
    store.add_working_hours(1)
    store.add_appointment("09:00", "09:30", staff_id=staff.id, status="cancelled")
    store.add_appointment("11:00", "11:30", staff_id=staff.id, status="in_progress")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY, staff.id)

    assert availability.occupied_slots == ["11:00"]


def test_other_staff_bookings_are_ignored(ctx, store):
    elif_ = store.add_staff("Elif")
    deniz = store.add_staff("Deniz")
    store.add_working_hours(1)
    store.add_appointment("09:00", "10:00", staff_id=deniz.id)

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY, elif_.id)

    assert availability.occupied_slots == []


def test_no_staff_means_no_occupancy_lookup(ctx, store):
    staff = store.add_staff("Elif")
    store.add_working_hours(1)
    store.add_appointment("09:00", "13:00", staff_id=staff.id)

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert availability.all_slots == NINE_TO_ONE
    assert availability.occupied_slots == []
    assert store.calls["get_appointments"] == 0


def test_working_hours_failure_returns_empty_result(ctx, store):
    store.add_working_hours(1)
    store.fail_on.add("get_working_hours")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY)

    assert availability.all_slots == []
    assert availability.occupied_slots == []


def test_appointment_lookup_failure_returns_empty_result(ctx, store):
    staff = store.add_staff("Elif")
    store.add_working_hours(1)
    store.fail_on.add("get_appointments")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY, staff.id)

    assert availability.all_slots == []
    assert availability.occupied_slots == []


def test_custom_interval(ctx, store):
    store.add_working_hours(1, "09:00", "10:00")

    availability = AvailabilityService.compute_availability(ctx, store, MONDAY, slot_interval_minutes=15)

    assert availability.all_slots == ["09:00", "09:15", "09:30", "09:45"]
