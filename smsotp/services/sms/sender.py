"""
Abstract SMS sender interface
"""
from abc import ABC, abstractmethod


class SMSSender(ABC):
    """Abstract base class for SMS delivery providers"""

    @abstractmethod
    async def send(self, destination: str, body: str) -> bool:
        """
        Send a text message.

        Args:
            destination: Phone number in +<country code><number> format
            body: Message text

        Returns:
            True if the provider accepted the message

        Raises:
            SMSDeliveryError: If the provider rejected or failed the send
        """
        pass
