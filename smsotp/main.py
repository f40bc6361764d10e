import sys
import logging

from dotenv import load_dotenv

# Load environment variables from .env file before settings are read
load_dotenv()

import sentry_sdk
import uvicorn
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from .core.config import settings
from .core.env import is_local_env, get_env_name
from .exception_handlers import register_exception_handlers
from .lifespan import lifespan
from .middleware.logging import LoggingMiddleware
from .routers import otp

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

# Use a consistent logger name for all app logs
logger = logging.getLogger("smsotp")

env = get_env_name()

if settings.SENTRY_DSN and not is_local_env():
    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=0.1,
            environment=env,
            # Phone numbers and codes are PII
            send_default_pii=False,
        )
        logger.info(f"Sentry error tracking initialized for environment: {env}")
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}", exc_info=True)
elif settings.SENTRY_DSN:
    logger.info("Sentry DSN configured but not initializing in local environment")

app = FastAPI(
    title="SMS OTP Gateway",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
register_exception_handlers(app)
app.include_router(otp.router)


def run():
    """Console entrypoint: serve the app on settings.PORT"""
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
