"""Remote-work notification dispatchers.

Outline
NotificationDispatcher  protocol consumed by the attendance service
LoggingDispatcher       records the event in the log only
WhatsAppDispatcher      posts a text message to the WhatsApp Cloud API
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Protocol

import httpx

from ..core.enums import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    def notify_remote_work(self, username: str, event: NotificationEvent, timestamp: datetime) -> None:
        raise NotImplementedError


class LoggingDispatcher(NotificationDispatcher):
    """Used when no messaging provider is configured."""

    def notify_remote_work(self, username: str, event: NotificationEvent, timestamp: datetime) -> None:
        logger.info("Remote work %s for %s at %s", event.value, username, timestamp.isoformat())


class WhatsAppDispatcher(NotificationDispatcher):
    """
    Client for the WhatsApp Cloud API messages endpoint.
    Sends one plain text message per remote-work clock event.
    """

    def __init__(
        self,
        *,
        api_url: str,
        token: str,
        phone_number_id: str,
        recipient: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            api_url: Base URL of the Graph API, e.g. https://graph.facebook.com/v17.0
            token: Bearer token for the business account
            phone_number_id: Sender phone number id
            recipient: Destination number in international format
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.phone_number_id = phone_number_id
        self.recipient = recipient
        self.timeout = timeout
        self._transport = transport

    def _message(self, username: str, event: NotificationEvent, timestamp: datetime) -> str:
        label = "Clock In" if event == NotificationEvent.CLOCK_IN else "Clock Out"
        return f"Remote work {label}: {username} at {timestamp.strftime('%Y-%m-%d %H:%M')}"

    def notify_remote_work(self, username: str, event: NotificationEvent, timestamp: datetime) -> None:
        payload = {
            "messaging_product": "whatsapp",
            "to": self.recipient.lstrip("+"),
            "type": "text",
            "text": {"body": self._message(username, event, timestamp)},
        }
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(
                f"{self.api_url}/{self.phone_number_id}/messages",
                json=payload,
                headers={"Authorization": f"Bearer {self.token}"},
            )
            response.raise_for_status()
        logger.info("WhatsApp %s notification sent for %s", event.value, username)
