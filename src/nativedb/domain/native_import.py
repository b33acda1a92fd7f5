"""Reconcile vendor feed entries with the canonical native store.

Refreshing a feed updates documentation fields only. Localized descriptions,
localized parameter text and the translation status are never touched by an
import, so human and AI work survives any number of re-imports.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from nativedb.domain.errors import RecordError
from nativedb.domain.model import (
    DEFAULT_APISET,
    DEFAULT_GAME,
    ExampleRecord,
    NativeDoc,
    NativeParam,
    NativeRecord,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from nativedb.domain.ports import CatalogRepositories, UnitOfWorkFactory

    type RawFeed = Mapping[str, Mapping[str, object]]
    type DocParser = Callable[[object], NativeDoc]

log = getLogger(__name__)

IMPORT_CONTRIBUTOR = "System_Import"
PROGRESS_EVERY = 1000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(slots=True)
class ImportResult:
    """Counters reported by one import run."""

    processed: int = 0
    upserted: int = 0
    examples_added: int = 0
    failed: int = 0


def resolve_build_number(value: object) -> int:
    """Collapse the polymorphic ``build`` field into a plain integer.

    Absent/null -> 0, integer -> itself, numeric string -> its leading
    integer, float -> truncated toward zero, anything unparseable -> 0.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def apply_patch(doc: NativeDoc, patch: NativeDoc | None) -> NativeDoc:
    """Backfill a vendor doc from its patch feed entry.

    The patch name becomes the single-player name unless it is itself a
    placeholder; the description is only filled when the vendor left it empty;
    patch examples are appended, never substituted.
    """

    if patch is None:
        return doc
    name_sp = doc.name_sp
    if patch.name and not patch.has_placeholder_name:
        name_sp = patch.name
    description = doc.description or patch.description
    return replace(
        doc,
        name_sp=name_sp,
        description=description,
        examples=doc.examples + patch.examples,
    )


def apply_defaults(doc: NativeDoc, *, default_game: str) -> NativeDoc:
    return replace(
        doc,
        apiset=doc.apiset or DEFAULT_APISET,
        game=doc.game or default_game,
    )


def merge_localized_params(
    fresh: Iterable[NativeParam],
    previous: NativeRecord | None,
) -> list[NativeParam]:
    """Carry localized parameter text over to a freshly parsed parameter list.

    Matching is by exact parameter name. A renamed parameter loses its
    localized text.
    """

    if previous is None:
        return list(fresh)
    localized = previous.localized_param_texts()
    return [param.with_localized(localized.get(param.name)) for param in fresh]


def refresh_documentation(
    record: NativeRecord,
    *,
    namespace: str,
    doc: NativeDoc,
    params: list[NativeParam],
) -> None:
    """Overwrite every documentation field of ``record`` from ``doc``."""

    record.jhash = doc.jhash
    record.name = doc.name
    record.name_sp = doc.name_sp
    record.namespace = namespace
    record.params = params
    record.return_type = doc.results
    record.description_original = doc.description
    record.apiset = doc.apiset
    record.game = doc.game
    record.build_number = doc.build


def build_record(
    native_hash: str,
    *,
    namespace: str,
    doc: NativeDoc,
    params: list[NativeParam],
) -> NativeRecord:
    return NativeRecord(
        hash=native_hash,
        jhash=doc.jhash,
        name=doc.name,
        name_sp=doc.name_sp,
        namespace=namespace,
        params=params,
        return_type=doc.results,
        description_original=doc.description,
        apiset=doc.apiset,
        game=doc.game,
        build_number=doc.build,
    )


def reconcile_native(
    repositories: CatalogRepositories,
    *,
    namespace: str,
    native_hash: str,
    doc: NativeDoc,
    patch: NativeDoc | None = None,
    default_game: str = DEFAULT_GAME,
) -> int:
    """Upsert one feed entry and its examples; return the number of examples added."""

    doc = apply_defaults(apply_patch(doc, patch), default_game=default_game)

    existing = repositories.natives.get(native_hash)
    params = merge_localized_params(doc.params, existing)
    if existing is None:
        repositories.natives.add(
            build_record(native_hash, namespace=namespace, doc=doc, params=params)
        )
    else:
        refresh_documentation(existing, namespace=namespace, doc=doc, params=params)

    return add_missing_examples(repositories, native_hash=native_hash, doc=doc)


def add_missing_examples(
    repositories: CatalogRepositories,
    *,
    native_hash: str,
    doc: NativeDoc,
) -> int:
    added = 0
    for example in doc.examples:
        language = example.lang.lower()
        code = example.code.strip()
        if not code:
            continue
        if repositories.examples.exists(native_hash=native_hash, language=language, code=code):
            continue
        repositories.examples.add(
            ExampleRecord(
                native_hash=native_hash,
                language=language,
                code=code,
                contributor=IMPORT_CONTRIBUTOR,
            )
        )
        added += 1
    return added


def parse_entry(parse_doc: DocParser, native_hash: str, raw_doc: object) -> NativeDoc:
    try:
        return parse_doc(raw_doc)
    except ValueError as exc:
        raise RecordError(f"Malformed feed entry: {exc}", native_hash=native_hash) from exc


def import_feed(
    feed: RawFeed,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    parse_doc: DocParser,
    patch: Mapping[str, NativeDoc] | None = None,
    default_game: str = DEFAULT_GAME,
) -> ImportResult:
    """Reconcile every entry of a vendor feed with the store.

    Each entry is committed on its own. A failing entry is logged and skipped;
    the rest of the batch continues.
    """

    patch = patch or {}
    result = ImportResult()

    with unit_of_work_factory() as uow:
        for namespace, entries in feed.items():
            for native_hash, raw_doc in entries.items():
                result.processed += 1
                try:
                    doc = parse_entry(parse_doc, native_hash, raw_doc)
                    added = reconcile_native(
                        uow.repositories,
                        namespace=namespace,
                        native_hash=native_hash,
                        doc=doc,
                        patch=patch.get(native_hash),
                        default_game=default_game,
                    )
                    uow.commit()
                except RecordError as exc:
                    uow.rollback()
                    result.failed += 1
                    log.warning(
                        "Skipping native %s in namespace %s: %s", native_hash, namespace, exc
                    )
                    continue
                except Exception:  # noqa: BLE001
                    uow.rollback()
                    result.failed += 1
                    log.exception("Skipping native %s in namespace %s", native_hash, namespace)
                    continue

                result.upserted += 1
                result.examples_added += added
                if result.processed % PROGRESS_EVERY == 0:
                    log.info("Processed %d natives...", result.processed)

    log.info(
        "Import finished: processed=%d, upserted=%d, examples_added=%d, failed=%d",
        result.processed,
        result.upserted,
        result.examples_added,
        result.failed,
    )
    return result
