from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from src.config import get_settings

SEND_MESSAGE_TIMEOUT = 10  # seconds
MAX_EMBEDS_PER_MESSAGE = 10
WEBHOOK_USERNAME = "Stock Radar"


class DiscordSender:
    """Send messages via Discord Webhook."""

    def __init__(self):
        settings = get_settings()
        self.webhook_url = settings.discord_webhook_url

    @classmethod
    def is_configured(cls) -> bool:
        settings = get_settings()
        return bool(settings.discord_webhook_url)

    def _post(self, client: httpx.Client, payload: Dict[str, Any]) -> None:
        response = client.post(self.webhook_url, json=payload)
        response.raise_for_status()

    def send(self, text: str, embeds: Optional[List[Dict[str, Any]]] = None) -> bool:
        """Post to the configured webhook.

        Embeds beyond the per-message limit go out in follow-up posts; the
        text only accompanies the first one.
        """
        embeds = embeds or []
        if not text and not embeds:
            logger.warning("Discord send called with no content")
            return False

        payloads: List[Dict[str, Any]] = []
        for i in range(0, max(len(embeds), 1), MAX_EMBEDS_PER_MESSAGE):
            payload: Dict[str, Any] = {"username": WEBHOOK_USERNAME}
            if text and i == 0:
                payload["content"] = text
            batch = embeds[i : i + MAX_EMBEDS_PER_MESSAGE]
            if batch:
                payload["embeds"] = batch
            payloads.append(payload)

        try:
            with httpx.Client(timeout=SEND_MESSAGE_TIMEOUT) as client:
                for payload in payloads:
                    self._post(client, payload)

            logger.info(f"Discord webhook: {len(payloads)} message(s) sent")
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Discord webhook error: {e.response.status_code} - {e.response.text}"
            )
            return False
        except httpx.RequestError as e:
            logger.error(f"Discord webhook request failed: {e}")
            return False
