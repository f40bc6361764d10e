"""
Stub SMS sender for dev/test environments
"""
import logging
from typing import List, Tuple

from ...core.env import get_env_name, is_production_env
from .sender import SMSSender

logger = logging.getLogger(__name__)


class StubSMSSender(SMSSender):
    """
    Logs messages instead of sending them.

    Keeps the last messages in ``outbox`` so local tooling can read them.
    """

    OUTBOX_LIMIT = 100

    def __init__(self):
        self.outbox: List[Tuple[str, str]] = []

        env = get_env_name()
        if is_production_env():
            logger.warning("[SMS][Stub] WARNING: Stub sender enabled in production! Codes will not be delivered.")
        else:
            logger.info(f"[SMS][Stub] Stub sender enabled for environment: {env}")

    async def send(self, destination: str, body: str) -> bool:
        self.outbox.append((destination, body))
        del self.outbox[:-self.OUTBOX_LIMIT]
        logger.info(f"[SMS][Stub] to={destination} body={body}")
        return True
