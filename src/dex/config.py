"""
DEX - Configuration and settings.

DexSettings holds everything the engines and the CLI read from the
environment. Nothing here is required: a bare checkout runs on defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Flag count at which a card is quarantined. Not configurable: the
# moderation rules and the UI copy ("3 reports will quarantine...") agree on it.
QUARANTINE_THRESHOLD = 3


class DexSettings(BaseSettings):
    """
    Settings shared by the library and the CLI.

    The Gemini key only switches the briefing generator into its
    simulated-AI mode; no network call is ever made with it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Simulated AI path (optional)
    gemini_api_key: str | None = None

    # Application
    dex_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Daily briefing generation
    generation_latency_seconds: float = Field(default=2.0, ge=0)
    generation_timeout_seconds: float = Field(default=10.0, gt=0)

    # Profile persistence for the CLI
    profile_store_dir: Path = Path(".dex")

    # DEX_LOG_SESSIONS=1 - write a JSONL journal per session (dev only)
    dex_log_sessions: bool = False

    @property
    def is_development(self) -> bool:
        return self.dex_env == "development"

    @property
    def is_production(self) -> bool:
        return self.dex_env == "production"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)


@lru_cache
def get_settings() -> DexSettings:
    """Get cached settings instance."""
    return DexSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: DexSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
