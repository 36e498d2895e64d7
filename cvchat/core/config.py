"""Configuration layer: load runtime settings from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable application settings shared by the API server and the chat page."""

    app_name: str = "CV Assistant API"
    app_version: str = "0.1.0"
    env: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_allow_origins: str = "*"
    azure_openai_api_key: str = ""
    azure_openai_timeout_seconds: float = 30.0
    chat_api_url: str = "http://localhost:8000"
    chat_api_timeout_seconds: float = 60.0

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from process env with deterministic defaults."""
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            app_version=os.getenv("APP_VERSION", cls.app_version),
            env=os.getenv("APP_ENV", cls.env),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            host=os.getenv("HOST", cls.host),
            port=_env_int("PORT", cls.port),
            cors_allow_origins=os.getenv("CORS_ALLOW_ORIGINS", cls.cors_allow_origins),
            azure_openai_api_key=os.getenv("AZURE_OPENAI_API_KEY", cls.azure_openai_api_key),
            azure_openai_timeout_seconds=_env_float(
                "AZURE_OPENAI_TIMEOUT_SECONDS", cls.azure_openai_timeout_seconds
            ),
            chat_api_url=os.getenv("CHAT_API_URL", cls.chat_api_url),
            chat_api_timeout_seconds=_env_float(
                "CHAT_API_TIMEOUT_SECONDS", cls.chat_api_timeout_seconds
            ),
        )
