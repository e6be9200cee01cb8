from __future__ import annotations

import logging

from src.app.config import APP_NAME
from src.app.domain.errors import MissingInputError, SmsDeliveryError
from src.app.infra.sms.twilio_provider import TwilioSmsProvider

logger = logging.getLogger(__name__)

CODE_TTL_MINUTES = 10

# Twilio error codes with a friendlier message
_TWILIO_ERROR_MESSAGES = {
    21211: "Invalid phone number",
    21614: "Phone number is not valid for this country",
}
DEFAULT_SMS_ERROR = "Error sending the SMS"


def sms_error_message(error: SmsDeliveryError) -> str:
    if error.code in _TWILIO_ERROR_MESSAGES:
        return _TWILIO_ERROR_MESSAGES[error.code]
    return error.message or DEFAULT_SMS_ERROR


class VerificationNotifier:
    """Sends one-time verification codes. The code itself is chosen by the client."""

    def __init__(self, provider: TwilioSmsProvider, app_name: str = APP_NAME):
        self._provider = provider
        self.app_name = app_name

    def message_body(self, code: str) -> str:
        return (
            f"Your {self.app_name} verification code is: {code}. "
            f"This code expires in {CODE_TTL_MINUTES} minutes."
        )

    async def send_code(self, phone_number: str, code: str) -> str:
        if not phone_number or not str(phone_number).strip() or not code or not str(code).strip():
            raise MissingInputError("Phone number and verification code are required")

        logger.info("Sending verification SMS to %s", phone_number)
        sid = await self._provider.send(phone_number.strip(), self.message_body(str(code).strip()))
        logger.info("Verification SMS sent: sid=%s", sid)
        return sid
