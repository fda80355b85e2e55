"""Configuration management for Agenda."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

AGENDA_HOME = Path(os.environ.get("AGENDA_HOME", Path.home() / ".agenda"))
CONFIG_FILE = AGENDA_HOME / "config" / "agenda.conf"
DATA_DIR = AGENDA_HOME / "data"


@dataclass
class Config:
    """Agenda configuration."""

    # Backend: HTTP API when set, otherwise JSON files in data_dir
    api_base_url: str = ""
    api_token: str = ""
    data_dir: str = ""
    # Week view hour rows (inclusive)
    week_first_hour: int = 7
    week_last_hour: int = 19
    # Activities due within this many days count as "next week"
    due_soon_days: int = 7

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_hour(key: str, value: str, default: int) -> int:
    try:
        hour = int(value.split(":")[0])
    except ValueError:
        logger.warning(f"Ignoring {key.upper()}={value!r}: not an hour")
        return default
    if not 0 <= hour <= 23:
        logger.warning(f"Ignoring {key.upper()}={value!r}: out of range")
        return default
    return hour


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from agenda.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value
            case "api_token":
                config.api_token = value
            case "data_dir":
                config.data_dir = value
            case "week_first_hour":
                config.week_first_hour = _parse_hour(key, value, config.week_first_hour)
            case "week_last_hour":
                config.week_last_hour = _parse_hour(key, value, config.week_last_hour)
            case "due_soon_days":
                try:
                    config.due_soon_days = int(value)
                except ValueError:
                    logger.warning(f"Ignoring DUE_SOON_DAYS={value!r}: not a number")
            case _:
                logger.debug(f"Unknown config key: {key}")

    if config.week_first_hour > config.week_last_hour:
        logger.warning(
            f"WEEK_FIRST_HOUR {config.week_first_hour} is after WEEK_LAST_HOUR "
            f"{config.week_last_hour}; using defaults"
        )
        config.week_first_hour, config.week_last_hour = 7, 19

    return config
