# salonbook/models/__init__.py
from .base import Base
from .business import Business
from .staff import Staff
from .service import Service
from .customer import Customer
from .working_hours import WorkingHours
from .appointment import Appointment, AppointmentStatus, BLOCKING_STATUSES
from .payment import Payment, PaymentMethod, PaymentStatus

__all__ = [
    "Base",
    "Business",
    "Staff",
    "Service",
    "Customer",
    "WorkingHours",
    "Appointment",
    "AppointmentStatus",
    "BLOCKING_STATUSES",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
]
