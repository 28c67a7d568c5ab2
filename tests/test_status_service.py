import random
import uuid
from datetime import time

import pytest

from conftest import MONDAY
from salonbook.core.exceptions import AppointmentGroupNotFoundError, PersistenceError, TransitionError
from salonbook.schemas.booking import BookingRequest, CustomerInfo
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService
from salonbook.services.appointment.booking_service import BookingService
from salonbook.services.appointment.status_service import ALLOWED_TRANSITIONS, StatusService, can_transition


@pytest.fixture
def group_id(ctx, store):
    cut = store.add_service("Haircut", 100, 30)
    color = store.add_service("Coloring", 150, 45)
    store.add_staff("Elif")
    request = BookingRequest(
        service_ids=[cut.id, color.id],
        appointment_date=MONDAY,
        start_time=time(9, 0),
        customer=CustomerInfo(first_name="Ayse", last_name="Yilmaz", phone="5551234567"),
    )
    return BookingService(store, rng=random.Random(0)).create_booking(ctx, request).group_id


def set_status(store, status):
    store.appointments = [r.model_copy(update={"status": status}) for r in store.appointments]


def statuses(store):
    return {r.status for r in store.appointments}


@pytest.mark.parametrize("current, requested, allowed", [
    ("scheduled", "confirmed", True),
    ("scheduled", "completed", True),
    ("scheduled", "cancelled", True),
    ("scheduled", "no_show", True),
    ("confirmed", "completed", True),
    ("confirmed", "scheduled", False),
    ("completed", "confirmed", True),
    ("completed", "scheduled", False),
    ("completed", "cancelled", False),
    ("cancelled", "scheduled", False),
    ("no_show", "confirmed", False),
    ("unknown", "confirmed", False),
])
def test_transition_table(current, requested, allowed):
    assert can_transition(current, requested) is allowed


def test_terminal_statuses_have_no_exits():
    assert ALLOWED_TRANSITIONS["cancelled"] == frozenset()
    assert ALLOWED_TRANSITIONS["no_show"] == frozenset()


def test_completing_updates_every_row_and_asks_for_payment(ctx, store, group_id):
    result = StatusService.transition_status(ctx, store, group_id, "completed")

    assert result.previous_status == "scheduled"
    assert result.new_status == "completed"
    assert result.payment_required is True
    assert len(result.appointment_ids) == 2
    assert statuses(store) == {"completed"}
    assert store.calls["update_appointment_status"] == 1


def test_other_transitions_do_not_ask_for_payment(ctx, store, group_id):
    result = StatusService.transition_status(ctx, store, group_id, "confirmed")

    assert result.payment_required is False
    assert statuses(store) == {"confirmed"}


def test_forbidden_transition_writes_nothing(ctx, store, group_id):
    set_status(store, "completed")

    with pytest.raises(TransitionError) as exc:
        StatusService.transition_status(ctx, store, group_id, "scheduled")

    assert exc.value.current_status == "completed"
    assert exc.value.requested_status == "scheduled"
    assert store.calls["update_appointment_status"] == 0
    assert statuses(store) == {"completed"}


def test_completion_can_be_undone(ctx, store, group_id):
    StatusService.transition_status(ctx, store, group_id, "completed")

    result = StatusService.transition_status(ctx, store, group_id, "confirmed")

    assert result.previous_status == "completed"
    assert statuses(store) == {"confirmed"}


def test_unknown_group(ctx, store):
    with pytest.raises(AppointmentGroupNotFoundError):
        StatusService.transition_status(ctx, store, uuid.uuid4(), "confirmed")


def test_failed_update_leaves_status_unchanged(ctx, store, group_id):
    store.fail_on.add("update_appointment_status")

    with pytest.raises(PersistenceError):
        StatusService.transition_status(ctx, store, group_id, "completed")

    assert AppointmentGroupService.get_group(ctx, store, group_id).status == "scheduled"
