from __future__ import annotations

import re
from typing import List

import httpx
from loguru import logger

from src.config import get_settings

# Telegram MarkdownV2 requires escaping these characters
_TELEGRAM_ESCAPE_CHARS = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")

TELEGRAM_API_BASE = "https://api.telegram.org"
SEND_MESSAGE_TIMEOUT = 10  # seconds
MAX_MESSAGE_LENGTH = 4096


def escape_markdown_v2(text: str) -> str:
    """Escape special characters for Telegram MarkdownV2 format."""
    return _TELEGRAM_ESCAPE_CHARS.sub(r"\\\1", text)


def _safe_cut(line: str, limit: int) -> int:
    piece = line[:limit]
    trailing = len(piece) - len(piece.rstrip("\\"))
    # an odd run of backslashes ends in an unfinished escape
    return limit - 1 if trailing % 2 and limit > 1 else limit


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Split text on line boundaries so every chunk fits in one message.

    A single line longer than ``limit`` is hard-wrapped, never between a
    MarkdownV2 escape backslash and the character it escapes.
    """
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            cut = _safe_cut(line, limit)
            chunks.append(line[:cut])
            line = line[cut:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class TelegramSender:
    """Send messages via Telegram Bot API."""

    def __init__(self):
        settings = get_settings()
        self.bot_token = settings.telegram_bot_token
        self.chat_id = settings.telegram_chat_id

    @classmethod
    def is_configured(cls) -> bool:
        """Check if Telegram credentials are set."""
        settings = get_settings()
        return bool(settings.telegram_bot_token and settings.telegram_chat_id)

    def send(self, text: str) -> bool:
        """Send a MarkdownV2 message, split into several if it is too long.

        Returns:
            True if every part was sent, False on the first failure.
        """
        if not text:
            logger.warning("Telegram send called with no content")
            return False

        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/sendMessage"
        try:
            with httpx.Client(timeout=SEND_MESSAGE_TIMEOUT) as client:
                for chunk in split_message(text, MAX_MESSAGE_LENGTH):
                    response = client.post(
                        url,
                        json={
                            "chat_id": self.chat_id,
                            "text": chunk,
                            "parse_mode": "MarkdownV2",
                            "disable_web_page_preview": True,
                        },
                    )
                    response.raise_for_status()

            logger.info(f"Telegram message sent to chat {self.chat_id}")
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Telegram API error: {e.response.status_code} - {e.response.text}"
            )
            return False
        except httpx.RequestError as e:
            logger.error(f"Telegram request failed: {e}")
            return False
