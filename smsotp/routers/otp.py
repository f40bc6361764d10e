from fastapi import APIRouter, Depends, Request

from ..dependencies import get_otp_service
from ..schemas.otp import (
    ErrorResponse,
    MessageResponse,
    SendOTPRequest,
    VerifyOTPRequest,
)
from ..services.otp_service import OTPService

router = APIRouter(tags=["otp"])

_error_responses = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("/send-otp", response_model=MessageResponse, responses=_error_responses)
async def send_otp(
    payload: SendOTPRequest,
    request: Request,
    service: OTPService = Depends(get_otp_service),
):
    """Issue a code for phoneNumber and text it. OTPError subclasses map to 400/500."""
    request_id = getattr(request.state, "request_id", None)
    await service.send_otp(payload.phoneNumber, request_id=request_id)
    return {"message": "OTP sent successfully"}


@router.post("/verify-otp", response_model=MessageResponse, responses=_error_responses)
async def verify_otp(
    payload: VerifyOTPRequest,
    request: Request,
    service: OTPService = Depends(get_otp_service),
):
    request_id = getattr(request.state, "request_id", None)
    await service.verify_otp(payload.phoneNumber, payload.otp, request_id=request_id)
    return {"message": "OTP verified successfully"}


@router.get("/healthz", include_in_schema=False)
async def healthz():
    return {"status": "ok"}
