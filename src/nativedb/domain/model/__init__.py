"""Public domain model surface."""

from __future__ import annotations

from .enums import SourceType, TranslationStatus
from .natives import (
    DEFAULT_APISET,
    DEFAULT_GAME,
    DEFAULT_RETURN_TYPE,
    UNNAMED_PREFIX,
    ExampleDoc,
    ExampleRecord,
    NativeDoc,
    NativeParam,
    NativeRecord,
    SourceRecord,
)

__all__ = [
    "DEFAULT_APISET",
    "DEFAULT_GAME",
    "DEFAULT_RETURN_TYPE",
    "UNNAMED_PREFIX",
    "ExampleDoc",
    "ExampleRecord",
    "NativeDoc",
    "NativeParam",
    "NativeRecord",
    "SourceRecord",
    "SourceType",
    "TranslationStatus",
]
