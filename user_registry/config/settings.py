"""
Application settings and environment configuration.

- API_TOKEN: shared bearer secret (default: mysecrettoken)
- HEALTH_PATH: path that bypasses authentication (default: /health)
- API_HOST / API_PORT: bind address for main.py (default: 0.0.0.0:8000)
- LOG_LEVEL: stdlib level name (default: INFO)
- LOG_FORMAT: json | console (default: json)
- Loads .env from project root when available.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is user_registry/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_API_TOKEN = "mysecrettoken"
DEFAULT_HEALTH_PATH = "/health"


@dataclass(frozen=True)
class Settings:
    """Typed service settings; build via get_settings() rather than directly."""

    api_token: str = DEFAULT_API_TOKEN
    health_path: str = DEFAULT_HEALTH_PATH
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def expected_authorization(self) -> str:
        """Exact Authorization header value the auth stage accepts."""
        return f"Bearer {self.api_token}"


def load_registry_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def _env(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached after the first call; tests call get_settings.cache_clear()
    after changing the environment.
    """
    load_registry_env()
    health_path = _env("HEALTH_PATH", DEFAULT_HEALTH_PATH)
    if not health_path.startswith("/"):
        health_path = "/" + health_path
    return Settings(
        api_token=_env("API_TOKEN", DEFAULT_API_TOKEN),
        health_path=health_path.rstrip("/") or DEFAULT_HEALTH_PATH,
        api_host=_env("API_HOST", "0.0.0.0"),
        api_port=int(_env("API_PORT", "8000")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        log_format=_env("LOG_FORMAT", "json").lower(),
    )
