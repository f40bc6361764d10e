from typing import Optional

from pydantic import BaseModel, Field


class SendOTPRequest(BaseModel):
    # Optional so a missing number reaches the service and is reported as a format error
    phoneNumber: Optional[str] = Field(None, examples=["+15551234567"])


class VerifyOTPRequest(BaseModel):
    phoneNumber: Optional[str] = Field(None, examples=["+15551234567"])
    otp: Optional[str] = Field(None, examples=["123456"])


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
