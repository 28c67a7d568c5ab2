# salonbook/core/exceptions.py
"""Error taxonomy for the scheduling core"""


class SalonBookError(Exception):
    """Base class for errors raised by the scheduling core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SalonBookError):
    """A booking precondition was not met; raised before any I/O"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class AvailabilityConflictError(SalonBookError):
    """The requested slot was taken between display and insert"""


class PersistenceError(SalonBookError):
    """A read or write against the database failed"""


class NotificationError(SalonBookError):
    """A notification could not be dispatched; never fails a booking"""


class TransitionError(SalonBookError):
    """The requested status change is not allowed from the current status"""

    def __init__(self, current_status: str, requested_status: str):
        super().__init__(
            f"Cannot change appointment status from '{current_status}' to '{requested_status}'"
        )
        self.current_status = current_status
        self.requested_status = requested_status


class BusinessNotFoundError(SalonBookError):
    """No active business with the given id"""


class AppointmentGroupNotFoundError(SalonBookError):
    """No appointment rows carry the given group id for this business"""
