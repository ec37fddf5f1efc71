from unittest.mock import MagicMock, patch

from src.notifications.dispatcher import NotificationDispatcher

MESSAGE = {"telegram": "msg", "discord_embeds": [{"title": "t"}]}


class TestNotificationDispatcher:
    @patch("src.notifications.dispatcher.get_settings")
    @patch("src.notifications.dispatcher.TelegramSender")
    @patch("src.notifications.dispatcher.DiscordSender")
    def test_dispatch_disabled(self, mock_discord, mock_telegram, mock_settings):
        mock_settings.return_value = MagicMock(notification_enabled=False)
        assert NotificationDispatcher().dispatch(MESSAGE) == {}
        mock_telegram.assert_not_called()
        mock_discord.assert_not_called()

    @patch("src.notifications.dispatcher.get_settings")
    @patch("src.notifications.dispatcher.TelegramSender")
    @patch("src.notifications.dispatcher.DiscordSender")
    def test_dispatch_all_channels(self, mock_discord_cls, mock_telegram_cls, mock_settings):
        mock_settings.return_value = MagicMock(notification_enabled=True)
        mock_telegram_cls.is_configured.return_value = True
        mock_telegram_cls.return_value.send.return_value = True
        mock_discord_cls.is_configured.return_value = True
        mock_discord_cls.return_value.send.return_value = False

        result = NotificationDispatcher().dispatch(MESSAGE)

        assert result == {"telegram": True, "discord": False}
        mock_telegram_cls.return_value.send.assert_called_once_with("msg")
        mock_discord_cls.return_value.send.assert_called_once_with(
            "", embeds=[{"title": "t"}]
        )

    @patch("src.notifications.dispatcher.get_settings")
    @patch("src.notifications.dispatcher.TelegramSender")
    @patch("src.notifications.dispatcher.DiscordSender")
    def test_dispatch_unconfigured_channels(self, mock_discord_cls, mock_telegram_cls, mock_settings):
        mock_settings.return_value = MagicMock(notification_enabled=True)
        mock_telegram_cls.is_configured.return_value = False
        mock_discord_cls.is_configured.return_value = False

        assert NotificationDispatcher().dispatch(MESSAGE) == {}
        mock_telegram_cls.return_value.send.assert_not_called()

    @patch("src.notifications.dispatcher.get_settings")
    @patch("src.notifications.dispatcher.TelegramSender")
    @patch("src.notifications.dispatcher.DiscordSender")
    def test_dispatch_skips_empty_message(self, mock_discord_cls, mock_telegram_cls, mock_settings):
        mock_settings.return_value = MagicMock(notification_enabled=True)
        mock_telegram_cls.is_configured.return_value = True
        mock_discord_cls.is_configured.return_value = True

        result = NotificationDispatcher().dispatch({"telegram": "", "discord_embeds": []})

        assert result == {}
        mock_telegram_cls.return_value.send.assert_not_called()
        mock_discord_cls.return_value.send.assert_not_called()
