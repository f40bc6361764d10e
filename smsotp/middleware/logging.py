import time
import uuid
import json
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    One JSON access-log line per request.

    Accepts an inbound X-Request-ID (or generates one), stores it on
    request.state for handlers and echoes it in the response headers.
    Request bodies are never logged: they carry phone numbers and codes.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.exception(
                "Unhandled error on %s %s after %sms: %s",
                request.method,
                request.url.path,
                round(duration_ms, 2),
                str(e)
            )
            # Re-raise so the exception handlers can respond
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "user_agent": request.headers.get("user-agent", ""),
            "remote_addr": request.client.host if request.client else None
        }

        logger.info(json.dumps(log_data))

        response.headers["X-Request-ID"] = request_id

        return response
