from src.notifications.formatter import (
    COLOR_NEW_PRODUCTS,
    MAX_EMBED_LINES,
    format_new_products,
)
from src.trackers.platforms.adidas import AdidasTracker
from src.trackers.platforms.geartrade import GeartradeTracker


class TestFormatNewProducts:
    def test_empty_list(self):
        result = format_new_products(GeartradeTracker(), [])
        assert result == {"telegram": "", "discord_embeds": []}

    def test_product_ids(self):
        tracker = GeartradeTracker()
        result = format_new_products(tracker, ["7301234567", "7309876543"])

        telegram = result["telegram"]
        assert telegram.startswith(r"*Geartrade \- La Sportiva 46\.5*")
        assert r"\- \#7301234567" in telegram
        assert r"\- \#7309876543" in telegram

        (embed,) = result["discord_embeds"]
        assert embed["title"] == "[New] Geartrade - La Sportiva 46.5"
        assert embed["url"] == tracker.url
        assert embed["color"] == COLOR_NEW_PRODUCTS
        assert embed["description"] == "- #7301234567\n- #7309876543"
        assert embed["footer"]["text"] == "geartrade_la_sportiva_46_5"

    def test_product_urls_are_not_prefixed(self):
        url = "https://www.adidas.com/us/evo-sl-shoes/IH1234.html"
        result = format_new_products(AdidasTracker(), [url])
        assert result["discord_embeds"][0]["description"] == f"- {url}"

    def test_long_list_is_truncated_in_embed(self):
        products = [str(i) for i in range(MAX_EMBED_LINES + 5)]
        result = format_new_products(GeartradeTracker(), products)

        lines = result["discord_embeds"][0]["description"].split("\n")
        assert len(lines) == MAX_EMBED_LINES + 1
        assert lines[-1] == "... and 5 more"
        # Telegram splits long messages itself, so nothing is dropped there
        assert r"\#29" in result["telegram"]
