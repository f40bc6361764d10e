"""
SMS sender factory
"""
import logging
from typing import Optional

from ...core.config import settings
from .sender import SMSSender
from .twilio_sms import TwilioSMSSender
from .stub_sender import StubSMSSender

logger = logging.getLogger(__name__)

_sender_instance: Optional[SMSSender] = None


def get_sms_sender() -> SMSSender:
    """
    Get SMS sender instance based on configuration.

    Returns:
        SMSSender instance (cached for the process)
    """
    global _sender_instance

    provider_type = settings.SMS_PROVIDER.lower()

    if provider_type == "twilio":
        if _sender_instance is None or not isinstance(_sender_instance, TwilioSMSSender):
            try:
                _sender_instance = TwilioSMSSender()
                logger.info("[SMS] Using Twilio sender")
            except ValueError as e:
                logger.error(f"[SMS] Failed to initialize Twilio sender: {e}")
                raise
        return _sender_instance

    elif provider_type == "stub":
        if _sender_instance is None or not isinstance(_sender_instance, StubSMSSender):
            _sender_instance = StubSMSSender()
            logger.info("[SMS] Using stub sender")
        return _sender_instance

    else:
        raise ValueError(f"Unknown SMS provider: {provider_type}. Must be one of: twilio, stub")


def reset_sms_sender() -> None:
    """Drop the cached sender (useful for testing)"""
    global _sender_instance
    _sender_instance = None
