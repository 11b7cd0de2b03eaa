"""Configuration management for FocusFlow."""

import json
import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

FOCUSFLOW_HOME = Path(os.environ.get("FOCUSFLOW_HOME", Path.home() / "focusflow"))
CONFIG_FILE = FOCUSFLOW_HOME / "config" / "focusflow.conf"
SESSION_FILE = FOCUSFLOW_HOME / "config" / ".session.json"


@dataclass
class Config:
    """FocusFlow configuration."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    todos_table: str = "todos"
    request_timeout: float = 10.0
    timezone: str = "UTC"

    @property
    def tzinfo(self) -> tzinfo:
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)


@dataclass
class Session:
    """Supabase auth session for the signed-in user."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0
    user_id: str = ""
    email: str = ""

    def save(self, path: Path | None = None) -> None:
        """Save session to file."""
        path = path or SESSION_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                    "user_id": self.user_id,
                    "email": self.email,
                }
            )
        )
        path.chmod(0o600)

    def clear(self, path: Path | None = None) -> None:
        """Forget the session in memory and on disk."""
        self.access_token = ""
        self.refresh_token = ""
        self.expires_at = 0
        self.user_id = ""
        self.email = ""
        path = path or SESSION_FILE
        path.unlink(missing_ok=True)

    @classmethod
    def load(cls, path: Path | None = None) -> "Session":
        """Load session from file."""
        path = path or SESSION_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
                user_id=data.get("user_id", ""),
                email=data.get("email", ""),
            )
        except (json.JSONDecodeError, AttributeError):
            logger.warning(f"Ignoring unreadable session file {path}")
            return cls()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from focusflow.conf file."""
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
            case "supabase_url":
                config.supabase_url = value.rstrip("/")
            case "supabase_anon_key":
                config.supabase_anon_key = value
            case "supabase_service_role_key":
                config.supabase_service_role_key = value
            case "todos_table":
                config.todos_table = value or config.todos_table
            case "request_timeout":
                try:
                    config.request_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid REQUEST_TIMEOUT {value!r}, using {config.request_timeout}")
            case "timezone":
                config.timezone = value or config.timezone
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
