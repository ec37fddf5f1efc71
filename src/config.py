from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage
    data_dir: Path = Path(".")
    trackers_file: str = "trackers.json"

    # HTTP fetch
    http_timeout: float = 30.0
    user_agent: str = "Mozilla/5.0"

    # Browser fetch
    browser_headless: bool = True
    browser_channel: Optional[str] = None  # e.g. "chrome"
    browser_user_data_dir: Optional[Path] = None
    browser_delay_min: float = 2.0
    browser_delay_max: float = 5.0
    browser_linger_seconds: int = 0
    # Saved page used instead of the live fetch when the file exists
    adidas_html_file: Optional[Path] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # CORS (comma-separated origins, empty means any origin)
    cors_origins: str = ""

    # Scheduler
    scheduler_enabled: bool = False
    check_interval_minutes: int = 30

    # Notifications
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    discord_webhook_url: str = ""
    notification_enabled: bool = True

    @property
    def trackers_path(self) -> Path:
        return self.data_dir / self.trackers_file

    def cache_path(self, filename: str) -> Path:
        return self.data_dir / filename


@lru_cache
def get_settings() -> Settings:
    return Settings()
