"""Configuration management for todosync."""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TODOSYNC_HOME = Path(os.environ.get("TODOSYNC_HOME", Path.home() / "todosync"))
CONFIG_FILE = TODOSYNC_HOME / "config" / "todosync.conf"
ENV_FILE = TODOSYNC_HOME / ".env"
DEFAULT_TASKS_FILE = TODOSYNC_HOME / "task.json"

SYNC_URL = "https://api.todoist.com/sync/v9/sync"


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Config:
    """todosync configuration."""

    todoist_token: str = ""
    timezone: str = "Asia/Singapore"
    language: str = "en"
    tasks_file: str = str(DEFAULT_TASKS_FILE)
    sync_url: str = SYNC_URL
    priority: int = 1
    request_timeout: float = 30.0
    batch: bool = False

    def __repr__(self) -> str:
        token = "***" if self.todoist_token else "''"
        return (
            f"Config(todoist_token={token}, timezone={self.timezone!r}, "
            f"language={self.language!r}, tasks_file={self.tasks_file!r}, "
            f"sync_url={self.sync_url!r}, priority={self.priority}, "
            f"request_timeout={self.request_timeout}, batch={self.batch})"
        )

    def zone(self) -> ZoneInfo:
        """Resolve the configured timezone."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(f"Unknown timezone: {self.timezone!r}")

    def require_token(self) -> str:
        """Return the API token, or raise if none is configured."""
        if not self.todoist_token:
            raise ConfigurationError(
                "Missing Todoist API token. Set TODOIST_KEY or add "
                f"todoist_token to {CONFIG_FILE}"
            )
        return self.todoist_token

    def validate(self, require_token: bool = True) -> None:
        """Check every setting the sync depends on."""
        if require_token:
            self.require_token()
        self.zone()
        if self.priority not in (1, 2, 3, 4):
            raise ConfigurationError(f"Priority must be 1-4, got {self.priority}")
        if not (math.isfinite(self.request_timeout) and self.request_timeout > 0):
            raise ConfigurationError(
                f"Request timeout must be a positive number, got {self.request_timeout}"
            )


def _strip_value(value: str) -> str:
    """Unquote a conf value and drop any inline comment."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")


def parse_bool(key: str, value: str | bool) -> bool:
    """Parse a boolean setting, rejecting anything unrecognised."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
    raise ConfigurationError(f"Invalid value for {key}: {value!r}")


def _parse_number(key: str, value: str, kind: type) -> int | float:
    try:
        number = kind(value)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {key}: {value!r}")
    if not math.isfinite(number):
        raise ConfigurationError(f"Invalid value for {key}: {value!r}")
    return number


def load_config(config_file: Path | None = None, env_file: Path | None = None) -> Config:
    """Load configuration from todosync.conf, .env and the environment.

    Precedence, lowest first: defaults, conf file, environment (including
    values loaded from .env, which never override variables already set).
    """
    config = Config()
    config_file = config_file or CONFIG_FILE

    # .env in TODOSYNC_HOME first, then the working directory
    load_dotenv(env_file or ENV_FILE, override=False)
    load_dotenv(Path.cwd() / ".env", override=False)

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _strip_value(value.strip())

            match key:
                case "todoist_token":
                    config.todoist_token = value
                case "timezone":
                    config.timezone = value
                case "language":
                    config.language = value
                case "tasks_file":
                    config.tasks_file = value
                case "sync_url":
                    config.sync_url = value
                case "priority":
                    config.priority = _parse_number(key, value, int)
                case "request_timeout":
                    config.request_timeout = _parse_number(key, value, float)
                case "batch":
                    config.batch = parse_bool(key, value)
                case _:
                    logger.warning(f"Ignoring unknown config key: {key}")
    else:
        logger.debug(f"No config file at {config_file}, using defaults")

    if os.environ.get("TODOIST_KEY"):
        config.todoist_token = os.environ["TODOIST_KEY"]
    if os.environ.get("TODOSYNC_TIMEZONE"):
        config.timezone = os.environ["TODOSYNC_TIMEZONE"]
    if os.environ.get("TODOSYNC_TASKS_FILE"):
        config.tasks_file = os.environ["TODOSYNC_TASKS_FILE"]

    return config
