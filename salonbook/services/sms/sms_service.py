# ============================================================================
# salonbook/services/sms/sms_service.py
# ============================================================================
"""Service for SMS operations"""
from twilio.rest import Client
from twilio.base.exceptions import TwilioException
from typing import Optional
import logging

from salonbook.config.settings import get_settings

logger = logging.getLogger(__name__)


class SMSService:
    """Handles SMS sending operations"""

    def __init__(self, client: Optional[Client] = None):
        settings = get_settings()
        self.from_phone = settings.TWILIO_FROM_NUMBER
        if client is not None:
            self.client = client
        elif settings.TWILIO_ACCOUNT_SID:
            self.client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        else:
            self.client = None

    def send_sms(
        self,
        to_phone: str,
        message_body: str,
        from_phone: Optional[str] = None
    ) -> Optional[str]:
        """Send SMS message via Twilio, returning the message SID"""
        if not self.client:
            logger.error("Twilio client not initialized")
            return None

        try:
            message = self.client.messages.create(
                to=to_phone,
                from_=from_phone or self.from_phone,
                body=message_body
            )
            logger.info(f"SMS sent successfully to {to_phone}: {message.sid}")
            return message.sid
        except TwilioException as e:
            logger.error(f"Twilio error sending SMS to {to_phone}: {str(e)}")
            return None
