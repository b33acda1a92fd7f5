"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select, update
from sqlalchemy.orm.attributes import set_committed_value

from nativedb.adapters.sqlalchemy.mappings import (
    native_examples_table,
    native_sources_table,
    natives_table,
)
from nativedb.domain.model import (
    ExampleRecord,
    NativeParam,
    NativeRecord,
    SourceRecord,
    SourceType,
    TranslationStatus,
)
from nativedb.domain.ports import NativeIdentity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session


class SqlAlchemyNativeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, native_hash: str) -> NativeRecord | None:
        return self.session.get(NativeRecord, native_hash)

    def add(self, record: NativeRecord) -> None:
        self.session.add(record)

    def list_pending(self, *, limit: int, after: str | None = None) -> Sequence[NativeRecord]:
        stmt = (
            select(NativeRecord)
            .where(natives_table.c.translation_status == TranslationStatus.PENDING)
            .order_by(natives_table.c.hash)
            .limit(limit)
        )
        if after is not None:
            stmt = stmt.where(natives_table.c.hash > after)
        return self.session.execute(stmt).scalars().all()

    def count_pending(self) -> int:
        stmt = (
            select(func.count())
            .select_from(natives_table)
            .where(natives_table.c.translation_status == TranslationStatus.PENDING)
        )
        return self.session.execute(stmt).scalar_one()

    def pending_hashes(self) -> set[str]:
        stmt = select(natives_table.c.hash).where(
            natives_table.c.translation_status == TranslationStatus.PENDING
        )
        return set(self.session.execute(stmt).scalars())

    def identities(self) -> Sequence[NativeIdentity]:
        stmt = select(natives_table.c.hash, natives_table.c.name, natives_table.c.jhash)
        return [
            NativeIdentity(hash=row.hash, name=row.name, jhash=row.jhash)
            for row in self.session.execute(stmt)
        ]

    def save_translation(
        self,
        native_hash: str,
        *,
        description_localized: str,
        params: Sequence[NativeParam],
        status: TranslationStatus,
    ) -> None:
        stmt = (
            update(natives_table)
            .where(natives_table.c.hash == native_hash)
            .values(
                description_localized=description_localized,
                params=list(params),
                translation_status=status,
                updated_at=func.now(),
            )
        )
        self.session.execute(stmt)


class SqlAlchemyExampleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, *, native_hash: str, language: str, code: str) -> bool:
        stmt = (
            select(native_examples_table.c.id)
            .where(native_examples_table.c.native_hash == native_hash)
            .where(native_examples_table.c.language == language)
            .where(native_examples_table.c.code == code)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def add(self, example: ExampleRecord) -> None:
        self.session.add(example)

    def count(self) -> int:
        stmt = select(func.count()).select_from(native_examples_table)
        return self.session.execute(stmt).scalar_one()


class SqlAlchemySourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, *, native_hash: str, source_type: SourceType) -> SourceRecord | None:
        stmt = (
            select(SourceRecord)
            .where(native_sources_table.c.native_hash == native_hash)
            .where(native_sources_table.c.source_type == source_type)
            .order_by(native_sources_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def add(self, source: SourceRecord) -> None:
        self.session.add(source)

    def update_content(self, source: SourceRecord, content: str) -> None:
        stmt = (
            update(native_sources_table)
            .where(native_sources_table.c.id == source.id)
            .values(content=content, updated_at=func.now())
        )
        self.session.execute(stmt)
        set_committed_value(source, "content", content)
