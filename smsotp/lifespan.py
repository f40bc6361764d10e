"""
Application lifespan management for startup and shutdown events
"""
import logging
from contextlib import asynccontextmanager

from .core.config import settings
from .core.env import get_env_name
from .core.startup_validation import validate_otp_policy, validate_sms_config
from .dependencies import get_otp_manager
from .workers.expiry_sweeper import ExpirySweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    """Manage application lifespan events"""
    logger.info(f"Starting SMS OTP gateway (ENV={get_env_name()})...")

    try:
        validate_otp_policy()
        validate_sms_config()
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    sweeper = None
    if settings.sweeper_enabled:
        sweeper = ExpirySweeper(get_otp_manager(), settings.OTP_SWEEP_INTERVAL_SECONDS)
        await sweeper.start()
    else:
        logger.info("Expiry sweeper disabled; expired OTPs are evicted on next access")
    app.state.expiry_sweeper = sweeper

    logger.info("Application startup completed successfully")

    yield

    logger.info("Shutting down SMS OTP gateway...")
    try:
        if sweeper is not None:
            await sweeper.stop()
        logger.info("Application shutdown completed successfully")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


__all__ = ['lifespan']
