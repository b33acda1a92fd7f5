"""Enumerate reversed-source artifacts from a local directory."""

from __future__ import annotations

from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nativedb.domain.errors import FeedIOError
from nativedb.domain.source_matching import SourceArtifact

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

ARTIFACT_SUFFIX: Final[str] = ".txt"


def list_artifacts(directory: Path) -> list[SourceArtifact]:
    """Return one artifact per ``*.txt`` file directly inside ``directory``.

    Artifacts come in name order; their content is read only on demand.
    Bytes that are not valid UTF-8 are stored as U+FFFD.
    """

    if not directory.is_dir():
        raise FeedIOError(f"Sources directory not found: {directory}")

    paths = sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() == ARTIFACT_SUFFIX
    )
    log.info("Found %d source files in %s", len(paths), directory)
    return [
        SourceArtifact(
            stem=path.stem,
            load=partial(path.read_text, encoding="utf-8", errors="replace"),
        )
        for path in paths
    ]
