"""Deterministic native-name hashing.

Reproduces the game engine's one-at-a-time (Jenkins) name hash bit for bit.
Artifact matching depends on this staying exact.
"""

from __future__ import annotations

from typing import Final

HASH_PREFIX: Final[str] = "0x"
_MASK: Final[int] = 0xFFFFFFFF


def joaat(name: str) -> int:
    """Return the 32-bit unsigned hash of ``name`` (case-insensitive)."""

    h = 0
    for char in name:
        # one code point per character; "İ".lower() would yield two
        h = (h + ord(char.lower()[0])) & _MASK
        h = (h + (h << 10)) & _MASK
        h ^= h >> 6
    h = (h + (h << 3)) & _MASK
    h ^= h >> 11
    return (h + (h << 15)) & _MASK


def resolve(name: str) -> str:
    """Return the canonical ``0xXXXXXXXX`` identity string for ``name``."""

    return f"{HASH_PREFIX}{joaat(name):08X}"


def normalize_key(value: str) -> str:
    """Canonical lookup key: identities compare case-insensitively."""

    return value.lower()


def looks_like_hash(value: str) -> bool:
    return value.lower().startswith(HASH_PREFIX)
