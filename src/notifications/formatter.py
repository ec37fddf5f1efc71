from __future__ import annotations

from typing import Any, Dict, List

from src.notifications.telegram import escape_markdown_v2
from src.trackers.base import BaseTracker

COLOR_NEW_PRODUCTS = 0x00CC66  # green

# Discord embed description limit is 4096; stay well below it
MAX_EMBED_LINES = 25


def _display(product: str) -> str:
    return product if product.startswith("http") else f"#{product}"


def format_new_products(tracker: BaseTracker, new_products: List[str]) -> Dict[str, Any]:
    """Format a new-products alert for all channels.

    Returns:
        dict with keys "telegram" (str) and "discord_embeds" (list).
    """
    if not new_products:
        return {"telegram": "", "discord_embeds": []}

    # Telegram MarkdownV2
    lines = [
        f"*{escape_markdown_v2(tracker.name)}*",
        escape_markdown_v2(f"{len(new_products)} new product(s) in stock"),
        "",
    ]
    for product in new_products:
        lines.append(escape_markdown_v2(f"- {_display(product)}"))
    lines.append("")
    lines.append(escape_markdown_v2(tracker.url))
    telegram_text = "\n".join(lines).strip()

    # Discord embed
    shown = [f"- {_display(p)}" for p in new_products[:MAX_EMBED_LINES]]
    hidden = len(new_products) - len(shown)
    if hidden > 0:
        shown.append(f"... and {hidden} more")
    embed = {
        "title": f"[New] {tracker.name}",
        "url": tracker.url,
        "color": COLOR_NEW_PRODUCTS,
        "description": "\n".join(shown),
        "footer": {"text": tracker.tracker_id},
    }

    return {"telegram": telegram_text, "discord_embeds": [embed]}
