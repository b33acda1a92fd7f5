"""SQLAlchemy mapping metadata for the native catalog."""

from __future__ import annotations

import json
import logging
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from nativedb.domain.model import (
    DEFAULT_APISET,
    DEFAULT_GAME,
    DEFAULT_RETURN_TYPE,
    ExampleRecord,
    NativeParam,
    NativeRecord,
    SourceRecord,
    SourceType,
    TranslationStatus,
)

log = logging.getLogger(__name__)


class NativeParamListType(TypeDecorator[list[NativeParam]]):
    """Parameter lists stored as a JSON array of objects."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[NativeParam] | None, dialect: Dialect) -> str:
        _ = dialect
        payload = [
            {
                "name": param.name,
                "type": param.type,
                "description": param.description,
                "description_localized": param.description_localized,
            }
            for param in value or ()
        ]
        return json.dumps(payload, ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[NativeParam]:
        _ = dialect
        if not value:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        params: list[NativeParam] = []
        for item in cast(list[Any], loaded):
            if not isinstance(item, dict):
                continue
            entry = cast(dict[str, Any], item)
            params.append(
                NativeParam(
                    name=str(entry.get("name") or ""),
                    type=str(entry.get("type") or ""),
                    description=str(entry.get("description") or ""),
                    description_localized=entry.get("description_localized") or None,
                )
            )
        return params


class TranslationStatusType(TypeDecorator[TranslationStatus]):
    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: TranslationStatus | int | None, dialect: Dialect) -> int:
        _ = dialect
        return int(value) if value is not None else int(TranslationStatus.PENDING)

    def process_result_value(self, value: int | None, dialect: Dialect) -> TranslationStatus:
        _ = dialect
        if value is None:
            return TranslationStatus.PENDING
        return TranslationStatus(value)


def _enum_values(enum_cls: type[SourceType]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

natives_table = Table(
    "natives",
    mapper_registry.metadata,
    Column("hash", String(32), primary_key=True),
    Column("jhash", String(32), nullable=True),
    Column("name", String(255), nullable=False),
    Column("name_sp", String(255), nullable=False, default=""),
    Column("namespace", String(64), nullable=False),
    Column("params", NativeParamListType, nullable=False),
    Column("return_type", String(64), nullable=False, default=DEFAULT_RETURN_TYPE),
    Column("apiset", String(20), nullable=False, default=DEFAULT_APISET),
    Column("game", String(20), nullable=False, default=DEFAULT_GAME),
    Column("build_number", Integer, nullable=False, default=0),
    Column("description_original", Text, nullable=False, default=""),
    Column("description_localized", Text, nullable=True),
    Column(
        "translation_status",
        TranslationStatusType,
        nullable=False,
        default=TranslationStatus.PENDING,
    ),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    Index("idx_name", "name"),
    Index("idx_namespace", "namespace"),
    Index("idx_status", "translation_status"),
)

native_examples_table = Table(
    "native_examples",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "native_hash",
        String(32),
        ForeignKey("natives.hash", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("language", String(20), nullable=False),
    Column("code", Text, nullable=False),
    Column("contributor", String(50), nullable=False, default="System"),
    Column(
        "updated_at",
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    Index("idx_native_examples_native_hash", "native_hash"),
)

native_sources_table = Table(
    "native_sources",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "native_hash",
        String(32),
        ForeignKey("natives.hash", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("code_content", Text, key="content", nullable=False),
    Column("code_lang", String(20), key="language", nullable=False, default="cpp"),
    Column(
        "source_type",
        Enum(
            SourceType,
            name="source_type",
            native_enum=False,
            length=32,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    ),
    Column("game_build", String(20), nullable=True),
    Column("contributor", String(50), nullable=False, default="System"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    Index("idx_native_sources_native_type", "native_hash", "source_type"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the catalog dataclasses onto their tables (idempotent)."""

    log.debug("Mapping catalog entities")

    mapper_registry.map_imperatively(NativeRecord, natives_table)
    mapper_registry.map_imperatively(ExampleRecord, native_examples_table)
    mapper_registry.map_imperatively(SourceRecord, native_sources_table)

    configure_mappers()
    return mapper_registry


