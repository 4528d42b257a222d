"""Environment-driven configuration for the inspector service."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    openai_model: str
    model_timeout_seconds: float
    chat_history_limit: int
    log_level: str

    @property
    def has_credentials(self) -> bool:
        return bool(self.openai_api_key)


def _optional(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def load_settings(env_path: str = ".env") -> Settings:
    """Load settings from the process environment and an optional .env file.

    Raises:
        ValueError: CHAT_HISTORY_LIMIT is negative.
    """
    load_dotenv(env_path)

    history_limit = int(_optional("CHAT_HISTORY_LIMIT", "0"))
    if history_limit < 0:
        raise ValueError(f"CHAT_HISTORY_LIMIT must be zero or positive, got {history_limit}")

    return Settings(
        openai_api_key=_optional("OPENAI_API_KEY"),
        openai_model=_optional("OPENAI_MODEL", "gpt-5"),
        model_timeout_seconds=float(_optional("MODEL_TIMEOUT_SECONDS", "120")),
        chat_history_limit=history_limit,
        log_level=_optional("LOG_LEVEL", "INFO").upper(),
    )
