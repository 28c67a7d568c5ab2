# salonbook/services/notification/notification_service.py
"""Fire-and-forget booking notifications"""
import logging
from typing import Optional
from uuid import UUID

from salonbook.config.settings import get_settings
from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import NotificationError
from salonbook.tasks.notification_tasks import (
    send_business_booking_alert,
    send_customer_booking_confirmation,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """Queues SMS notifications; never waits for delivery"""

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = get_settings().BOOKING_NOTIFICATIONS_ENABLED if enabled is None else enabled

    def notify_business_of_new_booking(self, ctx: BusinessContext, group_id: UUID) -> None:
        self._dispatch(send_business_booking_alert, ctx, group_id)

    def notify_customer_confirmation(self, ctx: BusinessContext, group_id: UUID) -> None:
        self._dispatch(send_customer_booking_confirmation, ctx, group_id)

    def _dispatch(self, task, ctx: BusinessContext, group_id: UUID) -> None:
        if not self.enabled:
            logger.debug(f"Notifications disabled, skipping {task.name} for group {group_id}")
            return

        try:
            task.delay(str(ctx.business_id), str(group_id))
        except Exception as e:
            raise NotificationError(f"Could not queue {task.name} for group {group_id}: {e}") from e

        logger.info(f"Queued {task.name} for group {group_id}")
