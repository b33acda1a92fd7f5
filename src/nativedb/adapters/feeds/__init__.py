"""Public interface for the vendor feed adapter."""

from __future__ import annotations

from .client import FeedDownloader
from .reader import RawFeed, load_feed, load_patch_map
from .schema import NativeDocPayload
from .translator import parse_native_doc

__all__ = [
    "FeedDownloader",
    "NativeDocPayload",
    "RawFeed",
    "load_feed",
    "load_patch_map",
    "parse_native_doc",
]
