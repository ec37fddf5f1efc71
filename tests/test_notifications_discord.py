from unittest.mock import MagicMock, patch

import httpx

from src.notifications.discord import WEBHOOK_USERNAME, DiscordSender

WEBHOOK = "https://discord.com/api/webhooks/123/abc"


def _client_returning(response):
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.post.return_value = response
    return mock_client


class TestDiscordSender:
    @patch("src.notifications.discord.get_settings")
    def test_is_configured(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        assert DiscordSender.is_configured() is True
        mock_settings.return_value = MagicMock(discord_webhook_url="")
        assert DiscordSender.is_configured() is False

    @patch("src.notifications.discord.get_settings")
    def test_send_text_success(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        sender = DiscordSender()

        with patch("httpx.Client") as mock_client_cls:
            mock_client = _client_returning(MagicMock(status_code=204))
            mock_client_cls.return_value = mock_client

            result = sender.send("Hello Discord")

        assert result is True
        mock_client.post.assert_called_once()
        payload = mock_client.post.call_args.kwargs["json"]
        assert payload == {"username": WEBHOOK_USERNAME, "content": "Hello Discord"}

    @patch("src.notifications.discord.get_settings")
    def test_send_batches_embeds(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        sender = DiscordSender()
        embeds = [{"title": f"Product {i}"} for i in range(12)]

        with patch("httpx.Client") as mock_client_cls:
            mock_client = _client_returning(MagicMock(status_code=204))
            mock_client_cls.return_value = mock_client

            result = sender.send("Restock", embeds=embeds)

        assert result is True
        assert mock_client.post.call_count == 2
        first, second = [c.kwargs["json"] for c in mock_client.post.call_args_list]
        assert first["content"] == "Restock"
        assert len(first["embeds"]) == 10
        assert "content" not in second
        assert second["embeds"] == embeds[10:]

    @patch("src.notifications.discord.get_settings")
    def test_send_empty_content_returns_false(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        assert DiscordSender().send("") is False

    @patch("src.notifications.discord.get_settings")
    def test_send_http_error(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        sender = DiscordSender()

        mock_response = MagicMock(status_code=429, text="Rate limited")
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Rate limited", request=MagicMock(), response=mock_response
        )
        with patch("httpx.Client") as mock_client_cls:
            mock_client_cls.return_value = _client_returning(mock_response)
            result = sender.send("Hello")

        assert result is False

    @patch("src.notifications.discord.get_settings")
    def test_send_request_error(self, mock_settings):
        mock_settings.return_value = MagicMock(discord_webhook_url=WEBHOOK)
        sender = DiscordSender()

        with patch("httpx.Client") as mock_client_cls:
            mock_client = _client_returning(None)
            mock_client.post.side_effect = httpx.RequestError("Timeout")
            mock_client_cls.return_value = mock_client

            result = sender.send("Hello")

        assert result is False
