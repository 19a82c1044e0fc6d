from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


def _read_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _read_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _read_log_level(name: str, default: str) -> str:
    level = os.getenv(name, default).upper()
    return level if isinstance(logging.getLevelName(level), int) else default


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    openai_timeout_seconds: float = 60.0
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def provider_configured(self) -> bool:
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    """Build Settings from the process environment (and a local .env, if any)."""
    load_dotenv()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_OPENAI_BASE_URL).rstrip("/"),
        openai_timeout_seconds=_read_float("OPENAI_TIMEOUT_SECONDS", 60.0),
        log_level=_read_log_level("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_read_int("PORT", 8000),
    )
