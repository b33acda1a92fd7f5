"""Match loose reversed-source artifacts to canonical natives."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from nativedb.domain.hashing import looks_like_hash, normalize_key, resolve
from nativedb.domain.model import SourceRecord, SourceType

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from nativedb.domain.ports import CatalogRepositories, NativeIdentity, UnitOfWorkFactory

log = getLogger(__name__)

SOURCE_LANGUAGE = "cpp"
SOURCE_CONTRIBUTOR = "Importer"
PROGRESS_EVERY = 100


@dataclass(frozen=True, slots=True)
class SourceArtifact:
    """A local file believed to hold one native's reversed implementation.

    ``load`` reads the content lazily so unmatched files are never read; it
    may raise ``OSError`` or ``UnicodeError``.
    """

    stem: str
    load: Callable[[], str]


@dataclass(slots=True)
class SourceImportResult:
    scanned: int = 0
    updated: int = 0
    unmatched: int = 0
    failed: int = 0


class HashLookup:
    """Case-insensitive table of every known alias of every stored native.

    Aliases are the hash itself, the human name, the resolved hash of the
    name and the secondary ``jhash``; all point at the canonical hash.
    """

    def __init__(self) -> None:
        self._aliases: dict[str, str] = {}

    @classmethod
    def from_identities(cls, identities: Iterable[NativeIdentity]) -> HashLookup:
        lookup = cls()
        for identity in identities:
            lookup.register(identity)
        return lookup

    def __len__(self) -> int:
        return len(self._aliases)

    def register(self, identity: NativeIdentity) -> None:
        canonical = identity.hash
        self._aliases[normalize_key(canonical)] = canonical
        if identity.name:
            self._aliases[normalize_key(identity.name)] = canonical
            self._aliases[normalize_key(resolve(identity.name))] = canonical
        if identity.jhash:
            self._aliases[normalize_key(identity.jhash)] = canonical

    def match(self, stem: str) -> str | None:
        """Return the canonical hash for an artifact stem, if any.

        Exact lookup first; stems that are not raw hash literals get a second
        chance through their resolved name hash.
        """

        found = self._aliases.get(normalize_key(stem))
        if found is not None:
            return found
        if looks_like_hash(stem):
            return None
        return self._aliases.get(normalize_key(resolve(stem)))


def upsert_source(
    repositories: CatalogRepositories,
    *,
    native_hash: str,
    content: str,
    source_type: SourceType = SourceType.GAME_REVERSED,
) -> None:
    existing = repositories.sources.get(native_hash=native_hash, source_type=source_type)
    if existing is not None:
        repositories.sources.update_content(existing, content)
        return
    repositories.sources.add(
        SourceRecord(
            native_hash=native_hash,
            content=content,
            language=SOURCE_LANGUAGE,
            source_type=source_type,
            contributor=SOURCE_CONTRIBUTOR,
        )
    )


def build_lookup(unit_of_work_factory: UnitOfWorkFactory) -> HashLookup:
    with unit_of_work_factory() as uow:
        return HashLookup.from_identities(uow.repositories.natives.identities())


def import_sources(
    artifacts: Iterable[SourceArtifact],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    lookup: HashLookup | None = None,
) -> SourceImportResult:
    """Attach every matching artifact to its native as a reversed source.

    Artifacts that match nothing are counted and skipped.
    """

    if lookup is None:
        log.info("Building hash lookup from the store...")
        lookup = build_lookup(unit_of_work_factory)

    result = SourceImportResult()
    with unit_of_work_factory() as uow:
        for artifact in artifacts:
            result.scanned += 1
            native_hash = lookup.match(artifact.stem)
            if native_hash is None:
                result.unmatched += 1
                continue
            try:
                content = artifact.load()
            except (OSError, UnicodeError) as exc:
                result.failed += 1
                log.warning("Failed to read %s: %s", artifact.stem, exc)
                continue
            try:
                upsert_source(uow.repositories, native_hash=native_hash, content=content)
                uow.commit()
            except Exception:  # noqa: BLE001
                uow.rollback()
                result.failed += 1
                log.exception("Failed to store source %s for %s", artifact.stem, native_hash)
                continue
            result.updated += 1
            if result.scanned % PROGRESS_EVERY == 0:
                log.info("Processed sources: %d", result.scanned)

    log.info(
        "Sources import complete: scanned=%d, updated=%d, unmatched=%d, failed=%d",
        result.scanned,
        result.updated,
        result.unmatched,
        result.failed,
    )
    return result
