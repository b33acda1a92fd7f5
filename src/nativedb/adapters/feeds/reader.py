"""Read feed files from disk."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from nativedb.domain.errors import FeedIOError

from .translator import parse_native_doc

if TYPE_CHECKING:
    from pathlib import Path

    from nativedb.domain.model import NativeDoc

log = getLogger(__name__)

type RawFeed = dict[str, dict[str, object]]

_FEED_ADAPTER: TypeAdapter[RawFeed] = TypeAdapter(dict[str, dict[str, object]])


def load_feed(path: Path) -> RawFeed:
    """Decode a ``namespace -> {hash -> doc}`` feed file; raises ``FeedIOError``."""

    log.info("Reading %s...", path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise FeedIOError(f"Cannot read feed {path}: {exc}") from exc
    try:
        return _FEED_ADAPTER.validate_json(content)
    except ValidationError as exc:
        raise FeedIOError(f"Malformed feed {path}: {exc.error_count()} error(s)") from exc


def load_patch_map(path: Path) -> dict[str, NativeDoc]:
    """Flatten a patch feed to ``hash -> doc``.

    Patch data is optional: an unreadable file yields an empty map and
    malformed entries are dropped.
    """

    try:
        feed = load_feed(path)
    except FeedIOError as exc:
        log.warning("Ignoring patch feed: %s", exc)
        return {}

    patch: dict[str, NativeDoc] = {}
    for entries in feed.values():
        for native_hash, raw_doc in entries.items():
            try:
                patch[native_hash] = parse_native_doc(raw_doc)
            except ValidationError:
                log.debug("Dropping malformed patch entry %s", native_hash)
    log.info("Patch data loaded (%d entries)", len(patch))
    return patch
