"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from nativedb.domain.ports.persistence import (
        ExampleRepository,
        NativeRepository,
        SourceRepository,
    )


@dataclass(slots=True)
class CatalogRepositories:
    """Repositories sharing one session/transaction scope."""

    natives: NativeRepository
    examples: ExampleRepository
    sources: SourceRepository


@runtime_checkable
class CatalogUnitOfWork(Protocol):
    """Unit-of-work boundary around the catalog repositories."""

    @property
    def repositories(self) -> CatalogRepositories: ...

    def __enter__(self) -> CatalogUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
