"""Configuration management for Daylog."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DAYLOG_HOME = Path(os.environ.get("DAYLOG_HOME", Path.home() / "daylog"))
CONFIG_FILE = DAYLOG_HOME / "config" / "daylog.conf"
DATA_DIR = DAYLOG_HOME / "data"


@dataclass
class Config:
    """Daylog configuration."""

    state_file: str = ""
    calendar_source: str = ""
    timezone: str = "Asia/Tokyo"
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)
    telegram_autosave_time: str = "23:30"
    telegram_reminder_time: str = "18:00"

    @property
    def state_path(self) -> Path:
        """Resolved path of the persisted task file."""
        if self.state_file:
            return Path(self.state_file).expanduser()
        return DATA_DIR / "tasks.yaml"

    @property
    def calendar_location(self) -> str:
        """Calendar CSV path or URL (default: data dir)."""
        return self.calendar_source or str(DATA_DIR / "calendar.csv")


def _unquote(value: str) -> str:
    """Strip matching quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            if end_quote != -1:
                return value[1:end_quote]
            return value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_user_ids(value: str) -> list[int]:
    users = []
    for raw in value.split(","):
        raw = raw.strip()
        if not raw:
            continue
        try:
            users.append(int(raw))
        except ValueError:
            logger.warning(f"Ignoring invalid TELEGRAM_ALLOWED_USERS entry: {raw!r}")
    return users


def load_config(path: Path | None = None) -> Config:
    """Load configuration from daylog.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "state_file":
                config.state_file = value
            case "calendar_source":
                config.calendar_source = value
            case "timezone":
                config.timezone = value
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                config.telegram_allowed_users = _parse_user_ids(value)
            case "telegram_autosave_time":
                config.telegram_autosave_time = value
            case "telegram_reminder_time":
                config.telegram_reminder_time = value

    return config
