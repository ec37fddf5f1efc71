from __future__ import annotations

from typing import Any, Dict

from loguru import logger

from src.config import get_settings
from src.notifications.discord import DiscordSender
from src.notifications.telegram import TelegramSender


class NotificationDispatcher:
    """Dispatches a formatted message to every configured channel."""

    def __init__(self):
        self.settings = get_settings()

    def dispatch(self, message: Dict[str, Any]) -> Dict[str, bool]:
        """Send one message to all configured channels.

        Args:
            message: Dict with "telegram" (str) and "discord_embeds" (list) keys.

        Returns:
            Dict with channel names as keys and whether the send succeeded.
        """
        if not self.settings.notification_enabled:
            logger.info("Notifications are disabled, skipping dispatch")
            return {}

        results: Dict[str, bool] = {}

        if TelegramSender.is_configured() and message.get("telegram"):
            results["telegram"] = TelegramSender().send(message["telegram"])
            if not results["telegram"]:
                logger.error("Telegram: failed to send notification")

        if DiscordSender.is_configured() and message.get("discord_embeds"):
            results["discord"] = DiscordSender().send(
                "", embeds=message["discord_embeds"]
            )
            if not results["discord"]:
                logger.error("Discord: failed to send notification")

        if not results:
            logger.debug("No notification channel configured")
        return results
