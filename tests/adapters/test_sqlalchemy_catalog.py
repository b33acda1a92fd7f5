from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect, select, text

from nativedb.adapters.sqlalchemy import SqlAlchemyUnitOfWork, StartupError
from nativedb.adapters.sqlalchemy.mappings import native_sources_table, natives_table
from nativedb.domain.model import (
    ExampleRecord,
    NativeParam,
    SourceRecord,
    SourceType,
    TranslationStatus,
)
from tests.helpers.catalog import make_record

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from nativedb.adapters.sqlalchemy import SqlAlchemyStore


def test_migrations_create_catalog_tables(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert {"natives", "native_examples", "native_sources"} <= set(inspector.get_table_names())
    index_names = {index["name"] for index in inspector.get_indexes("natives")}
    assert {"idx_name", "idx_namespace", "idx_status"} <= index_names


def test_native_round_trip_keeps_params_and_status(store: SqlAlchemyStore) -> None:
    params = [
        NativeParam(name="entity", type="Entity", description="The entity."),
        NativeParam(name="alive", type="BOOL", description_localized="存活"),
    ]
    with store.unit_of_work() as uow:
        uow.repositories.natives.add(make_record("0x00000001", params=params))
        uow.commit()

    with store.unit_of_work() as uow:
        record = uow.repositories.natives.get("0x00000001")

    assert record is not None
    assert record.params == params
    assert record.translation_status is TranslationStatus.PENDING
    assert record.apiset == "client"
    assert record.game == "gta5"


def test_pending_queries_follow_hash_order(store: SqlAlchemyStore) -> None:
    with store.unit_of_work() as uow:
        for native_hash in ("0x00000003", "0x00000001", "0x00000002"):
            uow.repositories.natives.add(make_record(native_hash))
        uow.repositories.natives.add(
            make_record("0x00000004", status=TranslationStatus.MANUALLY_EDITED)
        )
        uow.commit()

    with store.unit_of_work() as uow:
        natives = uow.repositories.natives
        first = natives.list_pending(limit=2)
        rest = natives.list_pending(limit=2, after=first[-1].hash)

        assert [record.hash for record in first] == ["0x00000001", "0x00000002"]
        assert [record.hash for record in rest] == ["0x00000003"]
        assert natives.count_pending() == 3
        assert natives.pending_hashes() == {"0x00000001", "0x00000002", "0x00000003"}
        assert {identity.hash for identity in natives.identities()} == {
            "0x00000001",
            "0x00000002",
            "0x00000003",
            "0x00000004",
        }


def test_save_translation_updates_only_localized_fields(
    store: SqlAlchemyStore,
    sqlite_engine: Engine,
) -> None:
    with store.unit_of_work() as uow:
        uow.repositories.natives.add(make_record("0x00000001", description="Original."))
        uow.commit()

    with store.unit_of_work() as uow:
        uow.repositories.natives.save_translation(
            "0x00000001",
            description_localized="原文。",
            params=[NativeParam(name="p0", description_localized="参数")],
            status=TranslationStatus.TRANSLATED,
        )
        uow.commit()

    with store.unit_of_work() as uow:
        record = uow.repositories.natives.get("0x00000001")
    assert record is not None
    assert record.description_original == "Original."
    assert record.description_localized == "原文。"
    assert record.translation_status is TranslationStatus.TRANSLATED
    assert record.params[0].description_localized == "参数"

    with sqlite_engine.connect() as connection:
        status = connection.execute(
            select(natives_table.c.translation_status).where(natives_table.c.hash == "0x00000001")
        ).scalar_one()
        raw = connection.execute(text("SELECT translation_status FROM natives")).scalar_one()
    assert status is TranslationStatus.TRANSLATED
    assert raw == 1


def test_examples_exist_by_exact_triple(store: SqlAlchemyStore) -> None:
    with store.unit_of_work() as uow:
        uow.repositories.natives.add(make_record("0x00000001"))
        uow.repositories.examples.add(
            ExampleRecord(native_hash="0x00000001", language="lua", code="Wait(0)")
        )
        uow.commit()

    with store.unit_of_work() as uow:
        examples = uow.repositories.examples
        assert examples.exists(native_hash="0x00000001", language="lua", code="Wait(0)")
        assert not examples.exists(native_hash="0x00000001", language="js", code="Wait(0)")
        assert not examples.exists(native_hash="0x00000001", language="lua", code="Wait(1)")
        assert examples.count() == 1


def test_source_update_content_persists_and_stores_enum_value(
    store: SqlAlchemyStore,
    sqlite_engine: Engine,
) -> None:
    with store.unit_of_work() as uow:
        uow.repositories.natives.add(make_record("0x00000001"))
        uow.repositories.sources.add(
            SourceRecord(native_hash="0x00000001", content="v1", contributor="Importer")
        )
        uow.commit()

    with store.unit_of_work() as uow:
        source = uow.repositories.sources.get(
            native_hash="0x00000001",
            source_type=SourceType.GAME_REVERSED,
        )
        assert source is not None
        uow.repositories.sources.update_content(source, "v2")
        assert source.content == "v2"
        uow.commit()

    with sqlite_engine.connect() as connection:
        row = connection.execute(
            text("SELECT code_content, code_lang, source_type FROM native_sources")
        ).one()
    assert tuple(row) == ("v2", "cpp", "game_reversed")
    assert native_sources_table.c.content.name == "code_content"


def test_unit_of_work_requires_context(store: SqlAlchemyStore) -> None:
    uow = SqlAlchemyUnitOfWork(store.session_factory)

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_disposed_store_rejects_new_units_of_work(store: SqlAlchemyStore) -> None:
    store.dispose()

    with pytest.raises(StartupError):
        store.unit_of_work()
