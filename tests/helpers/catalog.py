"""Reusable fakes and builders for native catalog tests."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Literal

from nativedb.domain.errors import TranslationServiceError
from nativedb.domain.model import (
    ExampleRecord,
    NativeParam,
    NativeRecord,
    SourceRecord,
    SourceType,
    TranslationStatus,
)
from nativedb.domain.ports import (
    CatalogRepositories,
    NativeIdentity,
    TranslationRequest,
    TranslationResult,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import TracebackType


def make_record(
    native_hash: str,
    *,
    name: str | None = None,
    description: str = "Returns something.",
    params: Iterable[NativeParam] = (),
    status: TranslationStatus = TranslationStatus.PENDING,
    jhash: str | None = None,
) -> NativeRecord:
    return NativeRecord(
        hash=native_hash,
        name=name or f"NATIVE_{native_hash[2:]}",
        namespace="MISC",
        jhash=jhash,
        params=list(params),
        description_original=description,
        translation_status=status,
    )


def raw_doc(
    name: str,
    *,
    description: str = "",
    params: Sequence[dict[str, object]] = (),
    examples: Sequence[dict[str, object]] = (),
    **extra: object,
) -> dict[str, object]:
    """Build one raw vendor feed entry."""

    doc: dict[str, object] = {
        "name": name,
        "params": list(params),
        "results": "void",
        "description": description,
        "examples": list(examples),
    }
    doc.update(extra)
    return doc


class InMemoryCatalog:
    """Thread-safe stand-in for the persistent store; writes apply immediately."""

    def __init__(self, records: Iterable[NativeRecord] = ()) -> None:
        self.lock = threading.Lock()
        self.natives: dict[str, NativeRecord] = {record.hash: record for record in records}
        self.examples: list[ExampleRecord] = []
        self.sources: list[SourceRecord] = []
        self.saves: list[str] = []
        self.on_page: Callable[[list[NativeRecord]], None] | None = None

    def unit_of_work(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self)


class FakeNativeRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def get(self, native_hash: str) -> NativeRecord | None:
        with self.catalog.lock:
            return self.catalog.natives.get(native_hash)

    def add(self, record: NativeRecord) -> None:
        with self.catalog.lock:
            self.catalog.natives[record.hash] = record

    def list_pending(self, *, limit: int, after: str | None = None) -> Sequence[NativeRecord]:
        with self.catalog.lock:
            pending = sorted(
                (record for record in self.catalog.natives.values() if record.is_pending),
                key=lambda record: record.hash,
            )
            if after is not None:
                pending = [record for record in pending if record.hash > after]
            page = [replace(record, params=list(record.params)) for record in pending[:limit]]
        if self.catalog.on_page is not None:
            self.catalog.on_page(page)
        return page

    def count_pending(self) -> int:
        with self.catalog.lock:
            return sum(1 for record in self.catalog.natives.values() if record.is_pending)

    def pending_hashes(self) -> set[str]:
        with self.catalog.lock:
            return {record.hash for record in self.catalog.natives.values() if record.is_pending}

    def identities(self) -> Sequence[NativeIdentity]:
        with self.catalog.lock:
            return [
                NativeIdentity(hash=record.hash, name=record.name, jhash=record.jhash)
                for record in self.catalog.natives.values()
            ]

    def save_translation(
        self,
        native_hash: str,
        *,
        description_localized: str,
        params: Sequence[NativeParam],
        status: TranslationStatus,
    ) -> None:
        with self.catalog.lock:
            record = self.catalog.natives[native_hash]
            record.description_localized = description_localized
            record.params = list(params)
            record.translation_status = status
            self.catalog.saves.append(native_hash)


class FakeExampleRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def exists(self, *, native_hash: str, language: str, code: str) -> bool:
        return any(
            (example.native_hash, example.language, example.code) == (native_hash, language, code)
            for example in self.catalog.examples
        )

    def add(self, example: ExampleRecord) -> None:
        self.catalog.examples.append(example)

    def count(self) -> int:
        return len(self.catalog.examples)


class FakeSourceRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def get(self, *, native_hash: str, source_type: SourceType) -> SourceRecord | None:
        for source in self.catalog.sources:
            if source.native_hash == native_hash and source.source_type is source_type:
                return source
        return None

    def add(self, source: SourceRecord) -> None:
        self.catalog.sources.append(source)

    def update_content(self, source: SourceRecord, content: str) -> None:
        source.content = content


class FakeUnitOfWork:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self._repositories = CatalogRepositories(
            natives=FakeNativeRepository(catalog),
            examples=FakeExampleRepository(catalog),
            sources=FakeSourceRepository(catalog),
        )
        self.commits = 0
        self.rollbacks = 0

    @property
    def repositories(self) -> CatalogRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class RecordingTranslator:
    """Translator fake that counts calls and answers from a callback."""

    def __init__(
        self,
        respond: Callable[[TranslationRequest], TranslationResult] | None = None,
    ) -> None:
        self._respond = respond or _echo_localized
        self._lock = threading.Lock()
        self.requests: list[TranslationRequest] = []

    @property
    def calls(self) -> int:
        with self._lock:
            return len(self.requests)

    def __call__(self, request: TranslationRequest) -> TranslationResult:
        with self._lock:
            self.requests.append(request)
        return self._respond(request)


class FailingTranslator(RecordingTranslator):
    def __init__(self) -> None:
        super().__init__(_always_fail)


def _echo_localized(request: TranslationRequest) -> TranslationResult:
    return TranslationResult(
        description=f"[zh] {request.description}",
        params={name: f"[zh] {text}" for name, text in request.params.items()},
    )


def _always_fail(request: TranslationRequest) -> TranslationResult:
    raise TranslationServiceError(f"API status 503 for {request.name}")
