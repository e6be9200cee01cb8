# src/app/infra/sms/twilio_provider.py
"""
Twilio SMS provider.
Sends through the twilio SDK, which is synchronous.
"""
from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from src.app.domain.errors import SmsDeliveryError

logger = logging.getLogger(__name__)


class TwilioSmsProvider:
    """
    Sends text messages from one Twilio number.

    The client handle is created once per process (see deps.get_twilio)
    and passed in, so tests can substitute it.
    """

    def __init__(self, client: Client, from_number: str):
        self._client = client
        self.from_number = from_number

    def _create(self, to: str, body: str) -> str:
        message = self._client.messages.create(to=to, from_=self.from_number, body=body)
        return message.sid

    async def send(self, to: str, body: str) -> str:
        """
        Send one SMS and return the message SID.

        Raises:
            SmsDeliveryError: network failure or provider rejection (with Twilio's error code)
        """
        try:
            sid = await run_in_threadpool(self._create, to, body)
        except TwilioRestException as e:
            logger.error("Twilio rejected message: status=%s, code=%s, message=%s", e.status, e.code, e.msg)
            raise SmsDeliveryError(e.msg or f"Twilio error ({e.status})", code=e.code) from e
        except Exception as e:
            logger.error("Error calling Twilio: %s", e)
            raise SmsDeliveryError(f"SMS provider unreachable: {e}") from e

        if not sid:
            raise SmsDeliveryError("SMS provider returned no message SID")
        return str(sid)
