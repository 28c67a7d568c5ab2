from datetime import date, time
from decimal import Decimal

import pytest

from conftest import MONDAY
from salonbook.core.exceptions import TransitionError
from salonbook.models.payment import PaymentMethod
from salonbook.schemas.appointment_group import PaymentRequest
from salonbook.schemas.booking import BookingRequest, CustomerInfo
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService
from salonbook.services.appointment.booking_service import BookingService
from salonbook.services.appointment.status_service import StatusService
from salonbook.services.payment.payment_service import PaymentService


@pytest.fixture
def group_id(ctx, store):
    cut = store.add_service("Haircut", 100, 30)
    color = store.add_service("Coloring", 150, 45)
    request = BookingRequest(
        service_ids=[cut.id, color.id],
        appointment_date=MONDAY,
        start_time=time(9, 0),
        customer=CustomerInfo(first_name="Ayse", last_name="Yilmaz", phone="5551234567"),
    )
    return BookingService(store).create_booking(ctx, request).group_id


@pytest.fixture
def completed_group_id(ctx, store, group_id):
    StatusService.transition_status(ctx, store, group_id, "completed")
    return group_id


def test_cash_payment_is_completed_now(ctx, store, completed_group_id):
    PaymentService.record_payment(ctx, store, completed_group_id,
                                  PaymentRequest(payment_method=PaymentMethod.CASH))

    group = AppointmentGroupService.get_group(ctx, store, completed_group_id)
    payment, = group.payments
    assert payment.payment_method == "cash"
    assert payment.payment_status == "completed"
    assert payment.amount == Decimal("250")
    assert payment.payment_date is not None
    assert payment.expected_payment_date is None
    assert group.amount_paid == Decimal("250")


def test_credit_payment_stays_pending(ctx, store, completed_group_id):
    PaymentService.record_payment(
        ctx, store, completed_group_id,
        PaymentRequest(payment_method=PaymentMethod.CREDIT, expected_payment_date=date(2026, 11, 1)),
    )

    payment, = AppointmentGroupService.get_group(ctx, store, completed_group_id).payments
    assert payment.payment_status == "pending"
    assert payment.payment_date is None
    assert payment.expected_payment_date == date(2026, 11, 1)


def test_card_payment_drops_expected_date(ctx, store, completed_group_id):
    PaymentService.record_payment(
        ctx, store, completed_group_id,
        PaymentRequest(payment_method=PaymentMethod.CARD, amount=Decimal("200"),
                       expected_payment_date=date(2026, 11, 1)),
    )

    payment, = AppointmentGroupService.get_group(ctx, store, completed_group_id).payments
    assert payment.amount == Decimal("200")
    assert payment.expected_payment_date is None


def test_payment_requires_completed_group(ctx, store, group_id):
    with pytest.raises(TransitionError):
        PaymentService.record_payment(ctx, store, group_id, PaymentRequest(payment_method=PaymentMethod.CASH))

    assert store.calls["insert_payment"] == 0


def test_edit_replaces_existing_payment(ctx, store, completed_group_id):
    PaymentService.record_payment(ctx, store, completed_group_id,
                                  PaymentRequest(payment_method=PaymentMethod.CREDIT))

    PaymentService.edit_payment(ctx, store, completed_group_id,
                                PaymentRequest(payment_method=PaymentMethod.CARD))

    group = AppointmentGroupService.get_group(ctx, store, completed_group_id)
    assert [p.payment_method for p in group.payments] == ["card"]
    assert group.status == "completed"
