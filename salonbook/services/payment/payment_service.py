# ============================================================================
# salonbook/services/payment/payment_service.py
# ============================================================================
"""Payment capture for completed appointment groups"""
import logging
from datetime import datetime, timezone
from uuid import UUID

from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import TransitionError, ValidationError
from salonbook.models.appointment import AppointmentStatus
from salonbook.models.payment import PaymentMethod, PaymentStatus
from salonbook.schemas.appointment_group import AppointmentGroup, PaymentRequest
from salonbook.schemas.records import PaymentInsert
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService

logger = logging.getLogger(__name__)


class PaymentService:
    """Records the payment offered after a group is completed.

    Payments hang off the group's first appointment row; the group's payment
    is the sum of its rows' payments.
    """

    @staticmethod
    def record_payment(
            ctx: BusinessContext,
            store,
            group_id: UUID,
            payment: PaymentRequest
    ) -> UUID:
        group = PaymentService._completed_group(ctx, store, group_id, "record a payment")
        payment_id = store.insert_payment(ctx, PaymentService.build_payment(group, payment))

        logger.info(f"Recorded {payment.payment_method.value} payment {payment_id} for group {group_id}")
        return payment_id

    @staticmethod
    def edit_payment(
            ctx: BusinessContext,
            store,
            group_id: UUID,
            payment: PaymentRequest
    ) -> UUID:
        """Replace the group's payments; the status stays completed"""
        group = PaymentService._completed_group(ctx, store, group_id, "edit the payment")
        payment_id = store.replace_payments(
            ctx,
            group.appointment_ids,
            PaymentService.build_payment(group, payment)
        )

        logger.info(f"Replaced payments of group {group_id} with {payment_id}")
        return payment_id

    @staticmethod
    def build_payment(group: AppointmentGroup, payment: PaymentRequest) -> PaymentInsert:
        """Credit payments stay pending until collected; cash and card are paid now"""
        amount = group.total_price if payment.amount is None else payment.amount
        if amount < 0:
            raise ValidationError("Payment amount cannot be negative", field="amount")

        is_credit = payment.payment_method == PaymentMethod.CREDIT

        return PaymentInsert(
            appointment_id=group.appointment_ids[0],
            amount=amount,
            payment_method=payment.payment_method.value,
            payment_status=PaymentStatus.PENDING.value if is_credit else PaymentStatus.COMPLETED.value,
            payment_date=None if is_credit else datetime.now(timezone.utc),
            expected_payment_date=payment.expected_payment_date if is_credit else None,
            notes=payment.notes or None,
        )

    @staticmethod
    def _completed_group(ctx: BusinessContext, store, group_id: UUID, action: str) -> AppointmentGroup:
        group = AppointmentGroupService.get_group(ctx, store, group_id)
        if group.status != AppointmentStatus.COMPLETED.value:
            logger.warning(f"Cannot {action} for group {group_id} in status {group.status}")
            raise TransitionError(group.status, "payment")
        return group
