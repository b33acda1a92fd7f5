"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from nativedb.adapters.artifacts import list_artifacts
from nativedb.adapters.feeds import FeedDownloader, load_feed, load_patch_map, parse_native_doc
from nativedb.adapters.sqlalchemy import SqlAlchemyStore
from nativedb.adapters.translation import build_chat_translator
from nativedb.config import (
    FeedKind,
    get_database_config,
    get_feed_config,
    get_translation_config,
)
from nativedb.domain.errors import FeedIOError
from nativedb.domain.native_import import ImportResult, import_feed
from nativedb.domain.source_matching import SourceImportResult, import_sources
from nativedb.domain.translation import TranslationPipeline, TranslationRunResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from nativedb.config import FeedConfig, TranslationConfig
    from nativedb.domain.model import NativeDoc
    from nativedb.domain.ports import Translator

log = getLogger(__name__)

DEFAULT_SOURCES_DIR: Final[Path] = Path("natives")


@contextmanager
def _store_scope(store: SqlAlchemyStore | None) -> Iterator[SqlAlchemyStore]:
    """Yield the given store, or open one from configuration and dispose it afterwards."""

    if store is not None:
        yield store
        return
    with SqlAlchemyStore.open(get_database_config()) as owned:
        yield owned


def _load_patch(feed_config: FeedConfig, downloader: FeedDownloader) -> dict[str, NativeDoc]:
    source = feed_config.source(FeedKind.PATCH)
    patch_path = feed_config.default_path(FeedKind.PATCH)
    try:
        downloader.ensure(source.url, patch_path)
    except FeedIOError as exc:
        log.warning("Patch feed unavailable, importing without it: %s", exc)
        return {}
    return load_patch_map(patch_path)


def import_natives(
    kind: FeedKind,
    path: Path | None = None,
    *,
    store: SqlAlchemyStore | None = None,
    feed_config: FeedConfig | None = None,
    downloader: FeedDownloader | None = None,
) -> ImportResult:
    """Import a vendor feed, downloading it first when the file is missing."""

    if kind is FeedKind.PATCH:
        raise ValueError("The patch feed is not imported on its own")

    effective_config = feed_config or get_feed_config()
    effective_downloader = downloader or FeedDownloader(effective_config.resilience)
    source = effective_config.source(kind)
    feed_path = path or effective_config.default_path(kind)

    effective_downloader.ensure(source.url, feed_path)
    patch = _load_patch(effective_config, effective_downloader) if source.use_patch else {}
    feed = load_feed(feed_path)

    log.info("Importing %s feed from %s", kind, feed_path)
    with _store_scope(store) as active_store:
        return import_feed(
            feed,
            unit_of_work_factory=active_store.unit_of_work,
            parse_doc=parse_native_doc,
            patch=patch,
            default_game=source.default_game,
        )


def import_source_artifacts(
    directory: Path | None = None,
    *,
    store: SqlAlchemyStore | None = None,
) -> SourceImportResult:
    """Attach ``*.txt`` reversed sources in ``directory`` to their natives."""

    artifacts = list_artifacts(directory or DEFAULT_SOURCES_DIR)
    with _store_scope(store) as active_store:
        return import_sources(artifacts, unit_of_work_factory=active_store.unit_of_work)


def clear_feeds(*, feed_config: FeedConfig | None = None) -> list[Path]:
    """Delete cached feed files; return the ones that were actually removed."""

    effective_config = feed_config or get_feed_config()
    removed: list[Path] = []
    for path in effective_config.cached_paths():
        if not path.exists():
            log.debug("Skipping %s, not cached", path)
            continue
        path.unlink()
        removed.append(path)
        log.info("Deleted %s", path)
    log.info("Cleared %d cached feed file(s)", len(removed))
    return removed


def translate_natives(
    *,
    store: SqlAlchemyStore | None = None,
    config: TranslationConfig | None = None,
    translator: Translator | None = None,
    workers: int | None = None,
) -> TranslationRunResult:
    """Localize every Pending native through the translation service."""

    owned_translator = None
    if translator is None or workers is None:
        resolved = config or get_translation_config()
        workers = workers or resolved.workers
        if translator is None:
            owned_translator = build_chat_translator(resolved)
            translator = owned_translator

    try:
        with _store_scope(store) as active_store:
            pipeline = TranslationPipeline(
                unit_of_work_factory=active_store.unit_of_work,
                translator=translator,
                workers=workers,
            )
            return pipeline.run()
    finally:
        if owned_translator is not None:
            owned_translator.close()
