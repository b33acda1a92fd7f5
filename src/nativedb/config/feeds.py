"""Vendor and patch feed locations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .http_resilience import ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

FEED_TIMEOUT_SECONDS = 120.0


class FeedKind(StrEnum):
    NATIVE = "native"
    NATIVE_CFX = "nativecfx"
    PATCH = "patch"


@dataclass(frozen=True, slots=True)
class FeedSource:
    kind: FeedKind
    url: str
    filename: str
    default_game: str = "gta5"
    use_patch: bool = True


FEED_SOURCES: dict[FeedKind, FeedSource] = {
    FeedKind.NATIVE: FeedSource(
        kind=FeedKind.NATIVE,
        url="https://static.cfx.re/natives/natives.json",
        filename="natives.json",
    ),
    FeedKind.NATIVE_CFX: FeedSource(
        kind=FeedKind.NATIVE_CFX,
        url="https://static.cfx.re/natives/natives_cfx.json",
        filename="natives_cfx.json",
    ),
    FeedKind.PATCH: FeedSource(
        kind=FeedKind.PATCH,
        url="https://github.com/alloc8or/gta5-nativedb-data/raw/master/natives.json",
        filename="natives_github.json",
        use_patch=False,
    ),
}


@dataclass(frozen=True, slots=True)
class FeedConfig:
    feeds_dir: Path
    resilience: ResilienceConfig

    def source(self, kind: FeedKind) -> FeedSource:
        return FEED_SOURCES[kind]

    def default_path(self, kind: FeedKind) -> Path:
        return self.feeds_dir / FEED_SOURCES[kind].filename

    def cached_paths(self) -> tuple[Path, ...]:
        return tuple(self.default_path(kind) for kind in FeedKind)


def get_feed_config(*, storage: StorageConfig | None = None) -> FeedConfig:
    storage_config = storage or get_storage_config()
    return FeedConfig(
        feeds_dir=storage_config.feeds_dir(),
        resilience=ResilienceConfig(
            name="feeds",
            timeout_seconds=FEED_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
        ),
    )
