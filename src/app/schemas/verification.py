from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class SendVerificationSmsRequest(BaseModel):
    phoneNumber: Optional[str] = None
    verificationCode: Optional[Union[str, int]] = None


class SendVerificationSmsResponse(BaseModel):
    success: bool
    messageSid: str
