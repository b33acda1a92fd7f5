"""Domain ports (interfaces) for persistence and external services."""

from __future__ import annotations

from .persistence import ExampleRepository, NativeIdentity, NativeRepository, SourceRepository
from .translation import TranslationRequest, TranslationResult, Translator
from .unit_of_work import CatalogRepositories, CatalogUnitOfWork, UnitOfWorkFactory

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ExampleRepository",
    "NativeIdentity",
    "NativeRepository",
    "SourceRepository",
    "TranslationRequest",
    "TranslationResult",
    "Translator",
    "UnitOfWorkFactory",
]
