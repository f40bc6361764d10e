"""
Phone OTP service: issue + SMS dispatch, and verification
"""
import asyncio
import logging
from typing import Any, Optional

from ..core.errors import (
    DeliveryFailed,
    InvalidPhoneFormat,
    OTPError,
    SMSDeliveryError,
)
from ..utils.phone import is_valid_phone, get_phone_last4
from .otp_manager import OTPManager
from .sms import SMSSender

logger = logging.getLogger(__name__)

OTP_MESSAGE_TEMPLATE = "Your OTP is: {code}. Valid for 5 minutes."


def build_otp_message(code: str) -> str:
    return OTP_MESSAGE_TEMPLATE.format(code=code)


class OTPService:
    """
    Glue between the HTTP handlers, the OTP manager and the SMS sender.

    If dispatch fails or times out the freshly issued code is discarded, so a
    code the caller was told failed can never be used.
    """

    DEFAULT_DISPATCH_TIMEOUT_SECONDS = 15.0

    def __init__(
        self,
        manager: OTPManager,
        sender: SMSSender,
        dispatch_timeout: Optional[float] = None,
    ):
        self.manager = manager
        self.sender = sender
        self.dispatch_timeout = (
            dispatch_timeout if dispatch_timeout is not None else self.DEFAULT_DISPATCH_TIMEOUT_SECONDS
        )

    async def send_otp(self, phone: Any, request_id: Optional[str] = None) -> None:
        """
        Issue an OTP for phone and deliver it by SMS.

        Raises:
            InvalidPhoneFormat: Before any code is generated or sent
            DeliveryFailed: Sender failed, returned False, or timed out
            asyncio.CancelledError: Re-raised after the issued code is discarded
        """
        phone_last4 = get_phone_last4(phone)

        if not is_valid_phone(phone):
            logger.warning(f"[OTP] Invalid phone number format (request_id={request_id})")
            raise InvalidPhoneFormat()

        code = self.manager.issue(phone)
        body = build_otp_message(code)

        # No store lock is held while the provider call is in flight
        try:
            delivered = await asyncio.wait_for(
                self.sender.send(phone, body),
                timeout=self.dispatch_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"[OTP] Timeout sending OTP to {phone_last4} (>{self.dispatch_timeout}s, request_id={request_id})"
            )
            self._roll_back(phone, code)
            raise DeliveryFailed()
        except asyncio.CancelledError:
            logger.warning(f"[OTP] Dispatch to {phone_last4} cancelled (request_id={request_id})")
            self._roll_back(phone, code)
            raise
        except SMSDeliveryError as e:
            logger.error(f"[OTP] SMS provider error for {phone_last4} (request_id={request_id}): {e}")
            self._roll_back(phone, code)
            raise DeliveryFailed() from e
        except Exception as e:
            logger.error(
                f"[OTP] Unexpected error sending OTP to {phone_last4} (request_id={request_id}): {type(e).__name__}: {e}",
                exc_info=True,
            )
            self._roll_back(phone, code)
            raise DeliveryFailed() from e

        if not delivered:
            logger.warning(f"[OTP] SMS provider declined message for {phone_last4} (request_id={request_id})")
            self._roll_back(phone, code)
            raise DeliveryFailed()

        logger.info(f"[OTP] OTP sent successfully to {phone_last4}")

    def _roll_back(self, phone: str, code: str) -> None:
        if self.manager.discard(phone, code):
            logger.info(f"[OTP] Discarded undelivered code for {get_phone_last4(phone)}")

    async def verify_otp(self, phone: Any, code: Any, request_id: Optional[str] = None) -> None:
        """
        Verify a submitted code.

        Raises:
            OTPNotFound, OTPExpired, TooManyAttempts, OTPMismatch
        """
        phone_last4 = get_phone_last4(phone)

        try:
            self.manager.verify(phone, code)
        except OTPError as e:
            logger.warning(
                f"[OTP] Verification failed for {phone_last4}: {type(e).__name__} (request_id={request_id})"
            )
            raise

        logger.info(f"[OTP] Verification successful for {phone_last4}")
