"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence


def require_env_vars(
    names: Sequence[str],
    *,
    placeholders: Collection[str] = (),
) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank.

    Values listed in ``placeholders`` (template defaults nobody filled in)
    count as missing.
    """

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip() or value.strip() in placeholders:
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def env_int(name: str, default: int) -> int:
    """Return an integer environment variable, falling back on absence or garbage."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default
