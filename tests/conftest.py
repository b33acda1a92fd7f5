from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from nativedb.adapters.sqlalchemy import SqlAlchemyStore, start_mappers
from nativedb.adapters.sqlalchemy.migrations import upgrade_head
from nativedb.config import NO_RETRY, FeedConfig, ResilienceConfig

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(sqlite_engine: Engine) -> Iterator[SqlAlchemyStore]:
    """Single-threaded store on the in-memory engine."""

    active = SqlAlchemyStore(sqlite_engine, migrate=False)
    try:
        yield active
    finally:
        active.dispose()


@pytest.fixture
def file_store(tmp_path: Path) -> Iterator[SqlAlchemyStore]:
    """File-backed store usable from worker threads."""

    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'nativedb.sqlite'}",
        future=True,
        connect_args={"timeout": 30, "check_same_thread": False},
    )
    active = SqlAlchemyStore(engine)
    try:
        yield active
    finally:
        active.dispose()


@pytest.fixture
def feed_config(tmp_path: Path) -> FeedConfig:
    feeds_dir = tmp_path / "feeds"
    feeds_dir.mkdir()
    return FeedConfig(
        feeds_dir=feeds_dir,
        resilience=ResilienceConfig(name="feeds-test", retry=NO_RETRY),
    )


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, object], Path]:
    def _write(name: str, payload: object) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
