from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.app.deps import get_verification_notifier
from src.app.domain.errors import MissingInputError, SmsDeliveryError
from src.app.schemas.recipes import FailureResponse
from src.app.schemas.verification import (
    SendVerificationSmsRequest,
    SendVerificationSmsResponse,
)
from src.app.services.verification_service import VerificationNotifier, sms_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verification"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=FailureResponse(error=message).model_dump())


@router.post(
    "/send-verification-sms",
    response_model=SendVerificationSmsResponse,
    responses={400: {"model": FailureResponse}, 500: {"model": FailureResponse}, 503: {"model": FailureResponse}},
)
async def send_verification_sms(
    payload: SendVerificationSmsRequest,
    notifier: Optional[VerificationNotifier] = Depends(get_verification_notifier),
):
    phone = payload.phoneNumber
    code = None if payload.verificationCode is None else str(payload.verificationCode)

    if not phone or not code:
        return _failure(status.HTTP_400_BAD_REQUEST, "Phone number and verification code are required")

    if notifier is None:
        logger.error("SMS requested but Twilio is not configured")
        return _failure(status.HTTP_503_SERVICE_UNAVAILABLE, "SMS service temporarily unavailable")

    try:
        sid = await notifier.send_code(phone, code)
    except MissingInputError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, e.message)
    except SmsDeliveryError as e:
        logger.error("Verification SMS failed: code=%s, error=%s", e.code, e.message)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, sms_error_message(e))

    return SendVerificationSmsResponse(success=True, messageSid=sid)
