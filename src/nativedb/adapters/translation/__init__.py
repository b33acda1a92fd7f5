"""Public interface for the translation service adapter."""

from __future__ import annotations

from .client import (
    ChatTranslator,
    build_chat_translator,
    extract_json_object,
    parse_translation,
)
from .schema import ChatCompletionResponse, TranslationPayload

__all__ = [
    "ChatCompletionResponse",
    "ChatTranslator",
    "TranslationPayload",
    "build_chat_translator",
    "extract_json_object",
    "parse_translation",
]
