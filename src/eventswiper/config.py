"""Configuration management for Event Swiper."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

EVENTSWIPER_HOME = Path(os.environ.get("EVENTSWIPER_HOME", Path.home() / "eventswiper"))
CONFIG_FILE = EVENTSWIPER_HOME / "config" / "eventswiper.conf"
DATA_DIR = EVENTSWIPER_HOME / "data"

API_BASE = "https://0jaku7mk0a.execute-api.eu-west-1.amazonaws.com/api"


@dataclass
class Config:
    """Event Swiper configuration."""

    events_api: str = f"{API_BASE}/events/mu2025"
    speakers_api: str = f"{API_BASE}/speakers/mu2025"
    data_expiry_days: float = 4
    request_timeout: int = 30
    calendar_name: str = "Money20/20 Selected Events"
    export_dir: str = ""
    state_dir: str = ""

    @property
    def state_path(self) -> Path:
        return Path(self.state_dir).expanduser() if self.state_dir else DATA_DIR

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir).expanduser() if self.export_dir else Path.cwd()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    if value.startswith(('"', "'")):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from eventswiper.conf file."""
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
            case "events_api":
                config.events_api = value
            case "speakers_api":
                config.speakers_api = value
            case "data_expiry_days":
                try:
                    config.data_expiry_days = float(value)
                except ValueError:
                    logger.warning(f"Invalid DATA_EXPIRY_DAYS {value!r}, using {config.data_expiry_days}")
            case "request_timeout":
                try:
                    config.request_timeout = int(value)
                except ValueError:
                    logger.warning(f"Invalid REQUEST_TIMEOUT {value!r}, using {config.request_timeout}")
            case "calendar_name":
                config.calendar_name = value
            case "export_dir":
                config.export_dir = value
            case "state_dir":
                config.state_dir = value
            case _:
                logger.debug(f"Ignoring unknown config key {key!r}")

    return config
