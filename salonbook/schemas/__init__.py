# salonbook/schemas/__init__.py
from .records import (
    WorkingHoursRecord,
    ServiceRecord,
    StaffRecord,
    CustomerRecord,
    PaymentRecord,
    AppointmentRecord,
    AppointmentFilter,
    AppointmentInsert,
    AppointmentGroupInsertResult,
    CustomerCreate,
    PaymentInsert,
)
from .booking import CustomerInfo, BookingRequest, BookingResult, Availability
from .appointment_group import (
    GroupedService,
    AppointmentGroup,
    StatusUpdateRequest,
    TransitionResult,
    PaymentRequest,
)
