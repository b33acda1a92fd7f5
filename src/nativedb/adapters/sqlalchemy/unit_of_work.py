"""SQLAlchemy-backed store handle and unit of work for the native catalog."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from nativedb.adapters.sqlalchemy.mappings import start_mappers
from nativedb.adapters.sqlalchemy.migrations import upgrade_head
from nativedb.adapters.sqlalchemy.repositories import (
    SqlAlchemyExampleRepository,
    SqlAlchemyNativeRepository,
    SqlAlchemySourceRepository,
)
from nativedb.domain.ports import CatalogRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from nativedb.config import DatabaseConfig

log = getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS: Final[float] = 30.0


class StartupError(RuntimeError):
    """Raised when a store or unit of work is used outside its lifetime."""


class SqlAlchemyStore:
    """Explicit handle on one database: engine, schema and session factory.

    Built once per command and passed to whatever needs a unit of work.
    """

    def __init__(self, engine: Engine, *, migrate: bool = True) -> None:
        start_mappers()
        if migrate:
            upgrade_head(engine=engine)
        self._engine: Engine | None = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def open(cls, config: DatabaseConfig) -> SqlAlchemyStore:
        connect_args: dict[str, object] = {}
        if config.is_sqlite:
            # worker threads write through their own connections
            connect_args = {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS, "check_same_thread": False}
        engine = create_engine(config.uri, future=True, connect_args=connect_args)
        log.info("Opening store at %s", engine.url.render_as_string(hide_password=True))
        return cls(engine)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StartupError("Store already disposed")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError("Store already disposed")
        return self._session_factory

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None

    def __enter__(self) -> SqlAlchemyStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()


class SqlAlchemyUnitOfWork:
    """One session per unit of work; never shared between threads."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            natives=SqlAlchemyNativeRepository(session),
            examples=SqlAlchemyExampleRepository(session),
            sources=SqlAlchemySourceRepository(session),
        )

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


if TYPE_CHECKING:
    from nativedb.domain.ports import CatalogUnitOfWork

    def _uow_check(store: SqlAlchemyStore) -> CatalogUnitOfWork:
        return store.unit_of_work()
