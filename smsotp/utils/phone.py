"""
Phone number validation utilities
"""
import re
from typing import Any

# +<country code: 1-3 digits><subscriber number: exactly 10 digits>
PHONE_PATTERN = re.compile(r"^\+[0-9]{1,3}[0-9]{10}$")


def is_valid_phone(phone: Any) -> bool:
    """
    Check phone number against the accepted format.

    Args:
        phone: Value submitted by the client (anything, not only str)

    Returns:
        True if phone is a string like +15551234567, False otherwise
    """
    if not isinstance(phone, str):
        return False
    # fullmatch so a trailing newline is not accepted
    return PHONE_PATTERN.fullmatch(phone) is not None


def get_phone_last4(phone: Any) -> str:
    """
    Get last 4 digits of phone number for safe logging.

    Args:
        phone: Phone number (can be in any format, or not a string at all)

    Returns:
        Last 4 digits as string, or all digits if less than 4
    """
    if not isinstance(phone, str):
        return "????"
    digits = ''.join(filter(str.isdigit, phone))

    if len(digits) >= 4:
        return digits[-4:]
    return digits
