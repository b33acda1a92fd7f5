"""Ports for persisting native catalog aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nativedb.domain.model import (
        ExampleRecord,
        NativeParam,
        NativeRecord,
        SourceRecord,
        SourceType,
        TranslationStatus,
    )


@dataclass(frozen=True, slots=True)
class NativeIdentity:
    """The identity columns of one stored native, used to build lookup tables."""

    hash: str
    name: str | None
    jhash: str | None


@runtime_checkable
class NativeRepository(Protocol):
    """Persistence contract for canonical native records."""

    def get(self, native_hash: str) -> NativeRecord | None: ...

    def add(self, record: NativeRecord) -> None: ...

    def list_pending(self, *, limit: int, after: str | None = None) -> Sequence[NativeRecord]: ...

    def count_pending(self) -> int: ...

    def pending_hashes(self) -> set[str]: ...

    def identities(self) -> Sequence[NativeIdentity]: ...

    def save_translation(
        self,
        native_hash: str,
        *,
        description_localized: str,
        params: Sequence[NativeParam],
        status: TranslationStatus,
    ) -> None: ...


@runtime_checkable
class ExampleRepository(Protocol):
    """Persistence contract for code examples attached to natives."""

    def exists(self, *, native_hash: str, language: str, code: str) -> bool: ...

    def add(self, example: ExampleRecord) -> None: ...

    def count(self) -> int: ...


@runtime_checkable
class SourceRepository(Protocol):
    """Persistence contract for reversed source artifacts attached to natives."""

    def get(self, *, native_hash: str, source_type: SourceType) -> SourceRecord | None: ...

    def add(self, source: SourceRecord) -> None: ...

    def update_content(self, source: SourceRecord, content: str) -> None: ...
