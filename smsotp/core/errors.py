"""
OTP error taxonomy.

Every error carries the HTTP status and the client-facing message the API
returns verbatim. Internal detail (provider errors, tracebacks) goes to logs.
"""


class OTPError(Exception):
    """Base exception for OTP issuance and verification failures"""

    status_code = 400
    message = "OTP error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPhoneFormat(OTPError):
    """Phone number does not match +<country code><10-digit subscriber number>"""
    message = "Invalid phone number format. Use format: +CountryCodeNumber"


class DeliveryFailed(OTPError):
    """SMS dispatch failed or timed out; the issued code has been discarded"""
    status_code = 500
    message = "Failed to send OTP"


class OTPNotFound(OTPError):
    """No OTP outstanding for this number"""
    message = "No OTP found for this number"


class OTPExpired(OTPError):
    message = "OTP expired"


class TooManyAttempts(OTPError):
    message = "Max verification attempts reached"


class OTPMismatch(OTPError):
    message = "Invalid OTP"


class SMSDeliveryError(Exception):
    """Raised by SMS senders when the provider rejects or fails a send"""
    pass
