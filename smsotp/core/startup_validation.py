"""
Startup validation functions.

These functions validate critical configuration before the application starts.
They raise ValueError if validation fails.
"""
import logging
from typing import Optional

from .config import Settings, settings as default_settings
from .env import get_env_name, is_local_env

logger = logging.getLogger("smsotp")

SUPPORTED_SMS_PROVIDERS = {"twilio", "stub"}


def validate_sms_config(config: Optional[Settings] = None):
    """Refuse to run outside local envs without a real SMS provider"""
    config = config or default_settings
    provider = config.SMS_PROVIDER.lower()

    if provider not in SUPPORTED_SMS_PROVIDERS:
        error_msg = (
            f"Unknown SMS_PROVIDER={config.SMS_PROVIDER!r}. "
            f"Must be one of: {', '.join(sorted(SUPPORTED_SMS_PROVIDERS))}"
        )
        logger.error(error_msg)
        raise ValueError(error_msg)

    if is_local_env():
        if provider == "twilio" and not config.twilio_configured:
            logger.warning("SMS_PROVIDER=twilio but Twilio credentials are incomplete; sends will fail")
        return

    if provider == "stub":
        error_msg = (
            "CRITICAL: Stub SMS provider cannot be used in non-local environment. "
            f"ENV={get_env_name()}. Set SMS_PROVIDER=twilio and Twilio credentials."
        )
        logger.error(error_msg)
        raise ValueError(error_msg)

    if not config.twilio_configured:
        missing = [
            name for name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER")
            if not getattr(config, name)
        ]
        error_msg = (
            f"CRITICAL: Missing required Twilio settings in {get_env_name()}: {', '.join(missing)}"
        )
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info("SMS provider validation passed")


def validate_otp_policy(config: Optional[Settings] = None):
    """TTL, attempt limit and timeouts must be positive"""
    config = config or default_settings
    problems = []
    if config.OTP_TTL_SECONDS <= 0:
        problems.append("OTP_TTL_SECONDS must be > 0")
    if config.OTP_MAX_ATTEMPTS < 1:
        problems.append("OTP_MAX_ATTEMPTS must be >= 1")
    if config.OTP_STORE_SHARDS < 1:
        problems.append("OTP_STORE_SHARDS must be >= 1")
    if config.SMS_TIMEOUT_SECONDS <= 0:
        problems.append("SMS_TIMEOUT_SECONDS must be > 0")
    if config.OTP_SWEEP_INTERVAL_SECONDS < 0:
        problems.append("OTP_SWEEP_INTERVAL_SECONDS must be >= 0")

    if problems:
        error_msg = f"Invalid OTP configuration: {'; '.join(problems)}"
        logger.error(error_msg)
        raise ValueError(error_msg)
