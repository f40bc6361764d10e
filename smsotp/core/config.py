from pydantic import BaseModel
import os


class Settings(BaseModel):
    # Environment and Debug Settings
    ENV: str = os.getenv("ENV", "dev")  # dev, staging, prod
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Error tracking (only initialised outside local envs)
    SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")

    # SMS delivery (Twilio)
    TWILIO_ACCOUNT_SID: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    TWILIO_PHONE_NUMBER: str = os.getenv("TWILIO_PHONE_NUMBER", "")
    TWILIO_TIMEOUT_SECONDS: int = int(os.getenv("TWILIO_TIMEOUT_SECONDS", "10"))
    SMS_PROVIDER: str = os.getenv("SMS_PROVIDER", "stub")  # twilio, stub
    SMS_TIMEOUT_SECONDS: float = float(os.getenv("SMS_TIMEOUT_SECONDS", "15"))  # Upper bound on a whole dispatch

    # OTP policy
    OTP_TTL_SECONDS: int = int(os.getenv("OTP_TTL_SECONDS", "300"))  # 5 minutes
    OTP_MAX_ATTEMPTS: int = int(os.getenv("OTP_MAX_ATTEMPTS", "3"))
    OTP_STORE_SHARDS: int = int(os.getenv("OTP_STORE_SHARDS", "64"))
    OTP_SWEEP_INTERVAL_SECONDS: int = int(os.getenv("OTP_SWEEP_INTERVAL_SECONDS", "0"))  # 0 = lazy eviction only

    @property
    def twilio_configured(self) -> bool:
        """True when account credentials and a sender number are all present."""
        return bool(
            self.TWILIO_ACCOUNT_SID and
            self.TWILIO_AUTH_TOKEN and
            self.TWILIO_PHONE_NUMBER
        )

    @property
    def sweeper_enabled(self) -> bool:
        return self.OTP_SWEEP_INTERVAL_SECONDS > 0


settings = Settings()
