"""
Twilio programmable SMS sender
"""
import asyncio
import logging
from typing import Optional

from twilio.rest import Client
from twilio.http.http_client import TwilioHttpClient
from twilio.base.exceptions import TwilioException

from ...core.config import settings
from ...core.errors import SMSDeliveryError
from ...utils.phone import get_phone_last4
from .sender import SMSSender

logger = logging.getLogger(__name__)


class TwilioSMSSender(SMSSender):
    """
    Sends messages through the Twilio Messages API.

    Requires TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER.
    """

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
        client: Optional[Client] = None,
    ):
        account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER
        self.timeout_seconds = timeout_seconds or settings.TWILIO_TIMEOUT_SECONDS

        if client is None:
            if not account_sid or not auth_token:
                raise ValueError("Twilio credentials not configured")

            http_client = TwilioHttpClient()
            http_client.timeout = self.timeout_seconds
            client = Client(account_sid, auth_token, http_client=http_client)

        if not self.from_number:
            raise ValueError("TWILIO_PHONE_NUMBER not configured for SMS sender")

        self.client = client

    async def send(self, destination: str, body: str) -> bool:
        phone_last4 = get_phone_last4(destination)

        def _create_message():
            """Synchronous Twilio API call - runs in executor thread"""
            return self.client.messages.create(
                body=body,
                from_=self.from_number,
                to=destination,
            )

        try:
            message = await asyncio.to_thread(_create_message)
        except TwilioException as e:
            logger.error(f"[SMS][Twilio] Failed to send SMS to {phone_last4}: {type(e).__name__}: {e}")
            raise SMSDeliveryError(f"Twilio rejected message: {e}") from e

        logger.info(f"[SMS][Twilio] SMS sent to {phone_last4}, SID: {message.sid}")
        return True
