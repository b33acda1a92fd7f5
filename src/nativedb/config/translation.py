"""Translation service configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_int, require_env_vars
from .http_resilience import NO_RETRY, ResilienceConfig

DEFAULT_AI_BASE_URL = "https://api.deepseek.com"
DEFAULT_AI_MODEL = "deepseek-chat"
DEFAULT_AI_WORKERS = 10
FALLBACK_AI_WORKERS = 5
DEFAULT_TARGET_LANGUAGE = "Simplified Chinese"
AI_TIMEOUT_SECONDS = 60.0
API_KEY_PLACEHOLDER = "your-api-key-here"


@dataclass(frozen=True, slots=True)
class TranslationConfig:
    """Holds translation service configuration values."""

    api_key: str
    model: str
    workers: int
    target_language: str
    resilience: ResilienceConfig


def get_translation_config() -> TranslationConfig:
    values = require_env_vars(("AI_API_KEY",), placeholders=(API_KEY_PLACEHOLDER,))
    workers = DEFAULT_AI_WORKERS
    if (os.getenv("AI_WORKERS") or "").strip():
        workers = env_int("AI_WORKERS", FALLBACK_AI_WORKERS)
    if workers <= 0:
        workers = FALLBACK_AI_WORKERS
    return TranslationConfig(
        api_key=values["AI_API_KEY"],
        model=os.getenv("AI_MODEL") or DEFAULT_AI_MODEL,
        workers=workers,
        target_language=os.getenv("AI_TARGET_LANGUAGE") or DEFAULT_TARGET_LANGUAGE,
        resilience=ResilienceConfig(
            name="translation",
            base_url=(os.getenv("AI_BASE_URL") or DEFAULT_AI_BASE_URL).rstrip("/"),
            timeout_seconds=AI_TIMEOUT_SECONDS,
            # attempts are budgeted by the translation pipeline itself
            retry=NO_RETRY,
        ),
    )
