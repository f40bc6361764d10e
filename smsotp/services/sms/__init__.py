"""
SMS delivery providers
"""
from .sender import SMSSender
from .twilio_sms import TwilioSMSSender
from .stub_sender import StubSMSSender
from .factory import get_sms_sender, reset_sms_sender

__all__ = [
    "SMSSender",
    "TwilioSMSSender",
    "StubSMSSender",
    "get_sms_sender",
    "reset_sms_sender",
]
