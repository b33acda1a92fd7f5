"""Port for the external description translation service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    name: str
    description: str
    params: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(frozen=True, slots=True)
class TranslationResult:
    description: str
    params: dict[str, str] = field(default_factory=dict[str, str])


@runtime_checkable
class Translator(Protocol):
    """Blocking call into the translation service.

    Raises ``TranslationServiceError`` on transport failure, non-success
    status or an unusable payload.
    """

    def __call__(self, request: TranslationRequest) -> TranslationResult: ...
