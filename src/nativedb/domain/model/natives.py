"""Native catalog entities.

``NativeRecord`` is the canonical, persisted aggregate. Its children
(``ExampleRecord``, ``SourceRecord``) are keyed by the owning native's hash.
``NativeDoc`` is the ingestion-side view of one feed entry before it is
reconciled with the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from nativedb.domain.model.enums import SourceType, TranslationStatus

UNNAMED_PREFIX = "_0x"
DEFAULT_APISET = "client"
DEFAULT_GAME = "gta5"
DEFAULT_RETURN_TYPE = "void"


@dataclass(frozen=True, slots=True)
class NativeParam:
    """One parameter of a native. Identity within a record is ``name``."""

    name: str
    type: str = ""
    description: str = ""
    description_localized: str | None = None

    def with_localized(self, text: str | None) -> NativeParam:
        return replace(self, description_localized=text)


@dataclass(eq=False, kw_only=True)
class NativeRecord:
    hash: str
    name: str
    namespace: str
    jhash: str | None = None
    name_sp: str = ""
    params: list[NativeParam] = field(default_factory=list["NativeParam"])
    return_type: str = DEFAULT_RETURN_TYPE
    apiset: str = DEFAULT_APISET
    game: str = DEFAULT_GAME
    build_number: int = 0
    description_original: str = ""
    description_localized: str | None = None
    translation_status: TranslationStatus = TranslationStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.translation_status is TranslationStatus.PENDING

    def localized_param_texts(self) -> dict[str, str]:
        """Map parameter name to its localized text, ignoring blank entries."""

        return {
            param.name: param.description_localized
            for param in self.params
            if param.description_localized
        }


@dataclass(eq=False, kw_only=True)
class ExampleRecord:
    native_hash: str
    language: str
    code: str
    contributor: str = "System"
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class SourceRecord:
    native_hash: str
    content: str
    language: str = "cpp"
    source_type: SourceType = SourceType.GAME_REVERSED
    contributor: str = "System"
    game_build: str | None = None
    id: int | None = None


@dataclass(frozen=True, slots=True)
class ExampleDoc:
    lang: str
    code: str


@dataclass(frozen=True, slots=True)
class NativeDoc:
    """A single vendor or patch feed entry after payload validation."""

    name: str = ""
    jhash: str | None = None
    comment: str = ""
    params: tuple[NativeParam, ...] = ()
    results: str = DEFAULT_RETURN_TYPE
    description: str = ""
    examples: tuple[ExampleDoc, ...] = ()
    apiset: str = ""
    game: str = ""
    build: int = 0
    name_sp: str = ""

    @property
    def has_placeholder_name(self) -> bool:
        return self.name.startswith(UNNAMED_PREFIX)
