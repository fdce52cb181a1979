"""Environment lookups with logged fallbacks for malformed values."""

from __future__ import annotations

import logging
import os
from typing import Sequence


logger = logging.getLogger(__name__)


def env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def env_float_list(name: str, default: Sequence[float]) -> tuple[float, ...]:
    """Parse a comma-separated list, dropping non-numeric and non-positive entries."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return tuple(default)
    values: list[float] = []
    for part in raw.split(","):
        text = part.strip()
        try:
            value = float(text)
        except ValueError:
            logger.warning("Ignoring non-numeric entry %r in %s", text, name)
            continue
        if value > 0:
            values.append(value)
    if not values:
        logger.warning("No usable values in %s=%r; using default", name, raw)
        return tuple(default)
    return tuple(values)
