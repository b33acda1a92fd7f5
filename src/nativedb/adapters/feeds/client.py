"""Download vendor feeds over HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from nativedb.adapters.http_resilience import ResilienceConfig, ResilientClient
from nativedb.domain.errors import FeedIOError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class FeedDownloader:
    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def download(self, url: str, destination: Path) -> Path:
        """Stream ``url`` into ``destination``; raises ``FeedIOError`` on any failure."""

        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(destination.name + ".part")
        log.info("Downloading %s to %s", url, destination)
        try:
            with self.client_factory(self.resilience) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with partial.open("wb") as handle:
                        for chunk in response.iter_bytes():
                            handle.write(chunk)
            partial.replace(destination)
        except (httpx.HTTPError, OSError) as exc:
            partial.unlink(missing_ok=True)
            raise FeedIOError(f"Download of {url} failed: {exc}") from exc
        log.info("Download complete: %s", destination)
        return destination

    def ensure(self, url: str, destination: Path) -> Path:
        """Return ``destination``, downloading it first when it does not exist yet."""

        if destination.is_file():
            return destination
        log.info("File %s not found", destination)
        return self.download(url, destination)
