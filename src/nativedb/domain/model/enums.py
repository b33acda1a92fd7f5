"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class TranslationStatus(IntEnum):
    PENDING = 0
    TRANSLATED = 1
    MANUALLY_EDITED = 2


class SourceType(StrEnum):
    CFX_OPEN_SOURCE = "cfx_open_source"
    GAME_REVERSED = "game_reversed"
    PSEUDO_LOGIC = "pseudo_logic"
