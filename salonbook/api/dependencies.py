# ============================================================================
# FILE: salonbook/api/dependencies.py
# Request-scoped collaborators for the scheduling endpoints
# ============================================================================
from fastapi import Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from salonbook.config.database import get_db
from salonbook.core.context import BusinessContext
from salonbook.core.exceptions import BusinessNotFoundError
from salonbook.services.appointment.booking_service import BookingService
from salonbook.services.notification.notification_service import NotificationService
from salonbook.services.persistence.booking_store import BookingStore


def get_booking_store(db: Session = Depends(get_db)) -> BookingStore:
    return BookingStore(db)


def get_business_context(
        business_id: UUID = Path(..., description="The business (tenant) ID"),
        store: BookingStore = Depends(get_booking_store)
) -> BusinessContext:
    """
    Resolve the tenant from the path.

    Raises:
        BusinessNotFoundError: unknown or deactivated business
    """
    business = store.get_business(business_id)
    if not business or not business.is_active:
        raise BusinessNotFoundError(f"Business {business_id} not found")

    return BusinessContext(business_id=business.id)


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_booking_service(
        store: BookingStore = Depends(get_booking_store),
        notifier: NotificationService = Depends(get_notification_service)
) -> BookingService:
    return BookingService(store, notifier)
