"""SQLAlchemy adapter package for nativedb."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyExampleRepository,
    SqlAlchemyNativeRepository,
    SqlAlchemySourceRepository,
)
from .unit_of_work import SqlAlchemyStore, SqlAlchemyUnitOfWork, StartupError

__all__ = [
    "SqlAlchemyExampleRepository",
    "SqlAlchemyNativeRepository",
    "SqlAlchemySourceRepository",
    "SqlAlchemyStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "mapper_registry",
    "start_mappers",
]
