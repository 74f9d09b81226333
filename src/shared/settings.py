"""
Application settings loaded from environment variables.
"""
import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

from src.shared.errors import ConfigurationError

log = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppSettings:
    """Deployment configuration shared by the web app and the launcher."""
    data_root: Path
    session_secret: str
    app_env: str = "development"
    rate_limit_requests: int = 10
    rate_limit_window_ms: int = 60_000
    app_url: str = "http://localhost:8000"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def db_path(self) -> Path:
        return self.data_root / "schemas.sqlite"


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")
    if value < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {value}")
    return value


def _session_secret(data_root: Path, production: bool) -> str:
    """Get the session secret from env, or a persisted generated key outside production."""
    env_key = os.environ.get("SESSION_SECRET")
    if env_key:
        return env_key
    if production:
        raise ConfigurationError("SESSION_SECRET must be set when APP_ENV=production")
    data_root.mkdir(parents=True, exist_ok=True)
    key_file = data_root / ".session_key"
    if key_file.exists():
        return key_file.read_text().strip()
    key = secrets.token_hex(32)
    key_file.write_text(key)
    log.info("Generated new session key at %s", key_file)
    return key


def load_settings() -> AppSettings:
    """Read settings from the environment.

    Raises:
        ConfigurationError: when a required value is missing or malformed.
    """
    data_root = Path(os.environ.get("SCHEMA_DATA_ROOT", "./data"))
    app_env = os.environ.get("APP_ENV", "development").strip().lower()
    production = app_env == "production"
    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got '{log_level}'")
    return AppSettings(
        data_root=data_root,
        session_secret=_session_secret(data_root, production),
        app_env=app_env,
        rate_limit_requests=_positive_int("RATE_LIMIT_REQUESTS", 10),
        rate_limit_window_ms=_positive_int("RATE_LIMIT_WINDOW_MS", 60_000),
        app_url=os.environ.get("APP_URL", "http://localhost:8000").rstrip("/"),
        log_level=log_level,
    )
