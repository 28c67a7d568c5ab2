# salonbook/services/notification/messages.py
"""SMS texts for booking notifications"""
from salonbook.models.business import Business
from salonbook.schemas.records import AppointmentRecord
from salonbook.utils.time_utils import format_time


def business_booking_message(appointment: AppointmentRecord) -> str:
    appointment_date = appointment.appointment_date.strftime("%d.%m.%Y")
    return (
        f"You have a new online booking on {appointment_date} at "
        f"{format_time(appointment.start_time)}. Please check your dashboard."
    )


def customer_confirmation_message(business: Business, appointment: AppointmentRecord) -> str:
    appointment_date = appointment.appointment_date.strftime("%d.%m.%Y")
    return (
        f"Your appointment at {business.name} on {appointment_date} at "
        f"{format_time(appointment.start_time)} is confirmed. "
        f"To cancel, please call {business.phone_number or 'the salon'}."
    )
