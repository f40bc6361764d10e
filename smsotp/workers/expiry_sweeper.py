"""
Expired-OTP sweeper

Optional background task that bounds memory by deleting records past their
TTL. Verification already evicts expired records lazily; the sweeper only
reaches numbers nobody verifies again.
"""
import asyncio
import logging
from typing import Optional

from ..services.otp_manager import OTPManager

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodically calls OTPManager.sweep_expired()"""

    def __init__(self, manager: OTPManager, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.manager = manager
        self.interval_seconds = interval_seconds
        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def start(self):
        """Start the sweeper"""
        if self.running:
            logger.warning("Expiry sweeper is already running")
            return

        self.running = True
        self.task = asyncio.create_task(self._run())
        logger.info(f"Expiry sweeper started (interval={self.interval_seconds}s)")

    async def stop(self):
        """Stop the sweeper"""
        if not self.running:
            return

        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        logger.info("Expiry sweeper stopped")

    def sweep_once(self) -> int:
        removed = self.manager.sweep_expired()
        if removed:
            logger.info(f"Expiry sweeper removed {removed} expired OTP record(s)")
        return removed

    async def _run(self):
        while self.running:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sweep_once()
            except Exception as e:
                logger.error(f"Expiry sweep failed: {e}", exc_info=True)
