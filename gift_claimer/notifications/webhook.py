from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger

SEND_MESSAGE_TIMEOUT = 10  # seconds


class WebhookSender:
    """Send messages to a Slack-style incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = SEND_MESSAGE_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    def send(self, text: str) -> bool:
        """Post ``{"text": text}`` to the webhook.

        Returns:
            True if the webhook answered 200, False otherwise.
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.webhook_url, json={"text": text})
        except httpx.RequestError as e:
            logger.error(f"Error sending webhook notification: {e}")
            return False

        if response.status_code != httpx.codes.OK:
            logger.warning(
                f"Received non-OK response code: {response.status_code} - {response.text}"
            )
            return False

        logger.info("Webhook notification sent successfully")
        return True
