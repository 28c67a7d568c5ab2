# ============================================================================
# salonbook/services/appointment/status_service.py
# ============================================================================
"""Appointment group status lifecycle"""
import logging
from typing import Dict, FrozenSet
from uuid import UUID

from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import TransitionError
from salonbook.models.appointment import AppointmentStatus
from salonbook.schemas.appointment_group import TransitionResult
from salonbook.services.appointment.appointment_group_service import AppointmentGroupService

logger = logging.getLogger(__name__)

S = AppointmentStatus

# completed -> confirmed is the "undo completion" escape hatch; payments stay as they are
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    S.SCHEDULED.value: frozenset({S.CONFIRMED.value, S.COMPLETED.value, S.CANCELLED.value, S.NO_SHOW.value}),
    S.CONFIRMED.value: frozenset({S.COMPLETED.value, S.CANCELLED.value, S.NO_SHOW.value}),
    S.COMPLETED.value: frozenset({S.CONFIRMED.value}),
    S.CANCELLED.value: frozenset(),
    S.NO_SHOW.value: frozenset(),
}


def can_transition(current_status: str, new_status: str) -> bool:
    return new_status in ALLOWED_TRANSITIONS.get(current_status, frozenset())


class StatusService:
    """Applies status changes to every row of an appointment group at once"""

    @staticmethod
    def transition_status(
            ctx: BusinessContext,
            store,
            group_id: UUID,
            new_status: str
    ) -> TransitionResult:
        """
        Move a group to new_status.

        The group is re-read from the store first, so the check runs against
        the persisted status. A failed write leaves the stored status as it was.

        Raises:
            AppointmentGroupNotFoundError: no rows for group_id
            TransitionError: new_status is not reachable from the current status
            PersistenceError: the update failed
        """
        group = AppointmentGroupService.get_group(ctx, store, group_id)

        if not can_transition(group.status, new_status):
            raise TransitionError(group.status, new_status)

        store.update_appointment_status(ctx, group.appointment_ids, new_status)

        logger.info(
            f"Appointment group {group_id}: {group.status} -> {new_status} "
            f"({len(group.appointment_ids)} rows)"
        )

        return TransitionResult(
            appointment_group_id=group_id,
            previous_status=group.status,
            new_status=new_status,
            appointment_ids=group.appointment_ids,
            payment_required=new_status == S.COMPLETED.value,
        )
