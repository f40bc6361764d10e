"""
OTP lifecycle: issuance, lazy expiry, attempt limiting and single-use consumption
"""
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from ..core.errors import (
    InvalidPhoneFormat,
    OTPExpired,
    OTPMismatch,
    OTPNotFound,
    TooManyAttempts,
)
from ..utils.phone import is_valid_phone, get_phone_last4
from .otp_store import OTPRecord, OTPStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OTPManager:
    """
    Exclusive owner of OTP records.

    Verify applies its checks in a fixed order: existence, expiry, attempt
    limit, value match. An expired record that also ran out of attempts
    therefore reports OTPExpired.
    """

    CODE_MIN = 100000
    CODE_MAX = 999999
    OTP_TTL = timedelta(minutes=5)
    MAX_ATTEMPTS = 3

    def __init__(
        self,
        store: Optional[OTPStore] = None,
        clock: Callable[[], datetime] = utc_now,
        ttl: Optional[timedelta] = None,
        max_attempts: Optional[int] = None,
    ):
        self.store = store if store is not None else OTPStore()
        self.clock = clock
        self.ttl = ttl if ttl is not None else self.OTP_TTL
        self.max_attempts = max_attempts if max_attempts is not None else self.MAX_ATTEMPTS

    @classmethod
    def generate_code(cls) -> str:
        """Uniform over [100000, 999999] from the OS CSPRNG"""
        return str(cls.CODE_MIN + secrets.randbelow(cls.CODE_MAX - cls.CODE_MIN + 1))

    def _is_expired(self, record: OTPRecord, now: datetime) -> bool:
        return now - record.created_at > self.ttl

    def issue(self, phone: str) -> str:
        """
        Create a fresh record for phone, replacing any existing one.

        Returns:
            The generated code, for the caller to dispatch

        Raises:
            InvalidPhoneFormat: If phone does not match the accepted format
        """
        if not is_valid_phone(phone):
            raise InvalidPhoneFormat()

        code = self.generate_code()
        self.store.put(phone, OTPRecord(code=code, created_at=self.clock(), attempts=0))
        logger.debug(f"[OTP] Issued code for {get_phone_last4(phone)}")
        return code

    def verify(self, phone: Any, submitted_code: Any) -> None:
        """
        Check submitted_code against the record for phone.

        Returns None on success; the record is consumed.

        Raises:
            OTPNotFound: No record (never issued, or already consumed/expired/exhausted)
            OTPExpired: Record older than the TTL; record deleted
            TooManyAttempts: Attempt limit reached; record deleted
            OTPMismatch: Wrong code; attempts incremented
        """
        if not isinstance(phone, str):
            raise OTPNotFound()

        with self.store.atomic(phone) as records:
            record = records.get(phone)
            if record is None:
                raise OTPNotFound()

            if self._is_expired(record, self.clock()):
                del records[phone]
                raise OTPExpired()

            if record.attempts >= self.max_attempts:
                del records[phone]
                raise TooManyAttempts()

            if self._codes_match(record.code, submitted_code):
                del records[phone]
                return

            record.attempts += 1
            if record.attempts >= self.max_attempts:
                del records[phone]
                raise TooManyAttempts()
            raise OTPMismatch()

    @staticmethod
    def _codes_match(expected: str, submitted: Any) -> bool:
        if not isinstance(submitted, str):
            return False
        return hmac.compare_digest(expected.encode("utf-8"), submitted.encode("utf-8", "surrogatepass"))

    def discard(self, phone: str, code: str) -> bool:
        """
        Roll back an issuance: delete the record only if it still holds code.

        A newer issuance for the same number is left untouched.

        Returns:
            True if a record was deleted
        """
        with self.store.atomic(phone) as records:
            record = records.get(phone)
            if record is not None and record.code == code:
                del records[phone]
                return True
            return False

    def sweep_expired(self) -> int:
        """Delete every record past its TTL. Returns the number removed."""
        now = self.clock()
        return self.store.purge(lambda record: self._is_expired(record, now))

    def peek(self, phone: str) -> Optional[OTPRecord]:
        """Copy of the current record, for diagnostics and tests"""
        return self.store.get(phone)
