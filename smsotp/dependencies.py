"""
FastAPI dependencies for the OTP endpoints.

The manager is process-wide; restarting the process drops every outstanding
OTP. Tests replace ``get_otp_service`` through ``app.dependency_overrides``.
"""
import logging
from datetime import timedelta
from typing import Optional

from .core.config import settings
from .services.otp_manager import OTPManager
from .services.otp_service import OTPService
from .services.otp_store import OTPStore
from .services.sms import get_sms_sender

logger = logging.getLogger(__name__)

_otp_manager: Optional[OTPManager] = None
_otp_service: Optional[OTPService] = None


def get_otp_manager() -> OTPManager:
    global _otp_manager
    if _otp_manager is None:
        _otp_manager = OTPManager(
            store=OTPStore(shards=settings.OTP_STORE_SHARDS),
            ttl=timedelta(seconds=settings.OTP_TTL_SECONDS),
            max_attempts=settings.OTP_MAX_ATTEMPTS,
        )
        logger.info(
            f"[OTP] Manager ready (ttl={settings.OTP_TTL_SECONDS}s, max_attempts={settings.OTP_MAX_ATTEMPTS}, "
            f"shards={settings.OTP_STORE_SHARDS})"
        )
    return _otp_manager


def get_otp_service() -> OTPService:
    global _otp_service
    if _otp_service is None:
        _otp_service = OTPService(
            manager=get_otp_manager(),
            sender=get_sms_sender(),
            dispatch_timeout=settings.SMS_TIMEOUT_SECONDS,
        )
    return _otp_service
