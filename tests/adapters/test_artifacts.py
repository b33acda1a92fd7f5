from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from nativedb.adapters.artifacts import list_artifacts
from nativedb.domain.errors import FeedIOError
from nativedb.domain.source_matching import import_sources
from tests.helpers.catalog import InMemoryCatalog, make_record


def test_list_artifacts_only_returns_text_files_in_name_order(tmp_path: Path) -> None:
    (tmp_path / "0xABCDEF12.txt").write_text("void a() {}", encoding="utf-8")
    (tmp_path / "GET_PED_COORDS.TXT").write_text("void b() {}", encoding="utf-8")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    (tmp_path / "nested.txt").mkdir()

    artifacts = list_artifacts(tmp_path)

    assert [artifact.stem for artifact in artifacts] == ["0xABCDEF12", "GET_PED_COORDS"]
    assert artifacts[1].load() == "void b() {}"


def test_list_artifacts_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FeedIOError):
        list_artifacts(tmp_path / "natives")


def test_latin1_artifact_is_stored_next_to_valid_ones(tmp_path: Path) -> None:
    (tmp_path / "0xAAAAAAAA.txt").write_bytes(b"int x = 1; // \xe9\xff latin-1")
    (tmp_path / "0xBBBBBBBB.txt").write_text("int y = 2;", encoding="utf-8")
    catalog = InMemoryCatalog([make_record("0xAAAAAAAA"), make_record("0xBBBBBBBB")])

    result = import_sources(list_artifacts(tmp_path), unit_of_work_factory=catalog.unit_of_work)

    assert (result.scanned, result.updated, result.failed) == (2, 2, 0)
    contents = {source.native_hash: source.content for source in catalog.sources}
    assert contents["0xAAAAAAAA"] == "int x = 1; // \ufffd\ufffd latin-1"
    assert contents["0xBBBBBBBB"] == "int y = 2;"
