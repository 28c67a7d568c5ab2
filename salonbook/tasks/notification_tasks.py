# ===== salonbook/tasks/notification_tasks.py =====
from uuid import UUID
import logging

from salonbook.config.celery_config import celery_app
from salonbook.config.database import SessionLocal
from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import NotificationError
from salonbook.schemas.records import AppointmentFilter
from salonbook.services.notification.messages import (
    business_booking_message,
    customer_confirmation_message,
)
from salonbook.services.persistence.booking_store import BookingStore
from salonbook.services.sms.sms_service import SMSService

logger = logging.getLogger(__name__)


def _load_booking(store: BookingStore, business_id: str, group_id: str):
    """Return (business, first appointment row) or (None, None)"""
    business = store.get_business(UUID(business_id))
    if not business:
        return None, None

    rows = store.get_appointments(
        BusinessContext(business_id=business.id),
        AppointmentFilter(appointment_group_id=UUID(group_id))
    )
    return business, (rows[0] if rows else None)


@celery_app.task(bind=True, max_retries=3)
def send_business_booking_alert(self, business_id: str, group_id: str):
    """
    Tell the salon about a new online booking

    Args:
        business_id: Business that received the booking
        group_id: Appointment group that was created
    """
    db = SessionLocal()
    try:
        store = BookingStore(db)
        business, appointment = _load_booking(store, business_id, group_id)

        if not business or not appointment:
            logger.warning(f"Booking {group_id} not found for business {business_id}")
            return {"status": "skipped", "reason": "booking_not_found"}

        if not business.business_notifications_enabled or not business.notification_phone:
            return {"status": "skipped", "reason": "business_notifications_disabled"}

        message_sid = SMSService().send_sms(
            to_phone=business.notification_phone,
            message_body=business_booking_message(appointment)
        )
        if not message_sid:
            raise NotificationError(f"SMS to business {business_id} was not sent")

        logger.info(f"Business alert sent for group {group_id}")
        return {"status": "success", "message_sid": message_sid}

    except Exception as exc:
        logger.error(f"Failed to send business alert for group {group_id}: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def send_customer_booking_confirmation(self, business_id: str, group_id: str):
    """
    Confirm a booking to the customer by SMS

    Args:
        business_id: Business the booking belongs to
        group_id: Appointment group that was created
    """
    db = SessionLocal()
    try:
        store = BookingStore(db)
        business, appointment = _load_booking(store, business_id, group_id)

        if not business or not appointment or not appointment.customer:
            logger.warning(f"Booking {group_id} not found for business {business_id}")
            return {"status": "skipped", "reason": "booking_not_found"}

        message_sid = SMSService().send_sms(
            to_phone=appointment.customer.phone,
            message_body=customer_confirmation_message(business, appointment)
        )
        if not message_sid:
            raise NotificationError(f"SMS to customer for group {group_id} was not sent")

        logger.info(f"Customer confirmation sent for group {group_id}")
        return {"status": "success", "message_sid": message_sid}

    except Exception as exc:
        logger.error(f"Failed to send customer confirmation for group {group_id}: {exc}")

        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()
