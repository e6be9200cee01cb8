from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from twilio.base.exceptions import TwilioRestException

from src.app.domain.errors import MissingInputError, SmsDeliveryError
from src.app.infra.sms.twilio_provider import TwilioSmsProvider
from src.app.services.verification_service import (
    DEFAULT_SMS_ERROR,
    VerificationNotifier,
    sms_error_message,
)

MESSAGES_URI = "/2010-04-01/Accounts/AC123/Messages.json"


class MessagesStub:
    def __init__(self, error: Exception | None = None, sid: str = "SM42") -> None:
        self.error = error
        self.sid = sid
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(sid=self.sid, status="queued")


class TwilioClientStub:
    def __init__(self, messages: MessagesStub) -> None:
        self.messages = messages


def _provider(messages: MessagesStub) -> TwilioSmsProvider:
    return TwilioSmsProvider(TwilioClientStub(messages), from_number="+15005550006")


class TestTwilioSmsProvider:
    def test_send_returns_sid(self) -> None:
        messages = MessagesStub()

        sid = asyncio.run(_provider(messages).send("+33612345678", "hello"))

        assert sid == "SM42"
        assert messages.calls == [{"to": "+33612345678", "from_": "+15005550006", "body": "hello"}]

    def test_rejection_carries_twilio_code(self) -> None:
        error = TwilioRestException(400, MESSAGES_URI, msg="The 'To' number is not valid.", code=21211, method="POST")

        with pytest.raises(SmsDeliveryError) as exc_info:
            asyncio.run(_provider(MessagesStub(error=error)).send("123", "hello"))

        assert exc_info.value.code == 21211
        assert exc_info.value.message == "The 'To' number is not valid."

    def test_network_error(self) -> None:
        with pytest.raises(SmsDeliveryError) as exc_info:
            asyncio.run(_provider(MessagesStub(error=ConnectionError("unreachable"))).send("+33612345678", "hello"))

        assert exc_info.value.code is None
        assert "unreachable" in exc_info.value.message

    def test_missing_sid(self) -> None:
        with pytest.raises(SmsDeliveryError):
            asyncio.run(_provider(MessagesStub(sid="")).send("+33612345678", "hello"))


class TestSmsErrorMessage:
    def test_invalid_number(self) -> None:
        assert sms_error_message(SmsDeliveryError("raw", code=21211)) == "Invalid phone number"

    def test_invalid_for_country(self) -> None:
        assert sms_error_message(SmsDeliveryError("raw", code=21614)) == "Phone number is not valid for this country"

    def test_other_code_passes_provider_message(self) -> None:
        assert sms_error_message(SmsDeliveryError("Queue overflow", code=30001)) == "Queue overflow"

    def test_empty_message_falls_back(self) -> None:
        assert sms_error_message(SmsDeliveryError("")) == DEFAULT_SMS_ERROR


class SmsProviderStub:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send(self, to: str, body: str) -> str:
        self.sent.append((to, body))
        return "SM1"


class TestVerificationNotifier:
    def test_send_code(self) -> None:
        provider = SmsProviderStub()

        sid = asyncio.run(VerificationNotifier(provider).send_code(" +33612345678 ", "482913"))

        assert sid == "SM1"
        to, body = provider.sent[0]
        assert to == "+33612345678"
        assert "482913" in body
        assert "10 minutes" in body

    @pytest.mark.parametrize("phone, code", [("", "1234"), ("+33612345678", ""), (None, None)])
    def test_requires_phone_and_code(self, phone, code) -> None:
        provider = SmsProviderStub()
        with pytest.raises(MissingInputError):
            asyncio.run(VerificationNotifier(provider).send_code(phone, code))
        assert provider.sent == []
