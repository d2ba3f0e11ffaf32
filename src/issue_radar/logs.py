"""Process-wide logging setup driven by the LOG_LEVEL setting."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(name)s %(message)s"


def resolve_level(level: object) -> int:
    """Map a level name or number to a logging level, defaulting to INFO."""
    if isinstance(level, int):
        return level
    name = str(level or "").strip().upper()
    resolved = logging.getLevelName(name) if name else None
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: object = "INFO") -> int:
    lvl = resolve_level(level)
    logging.basicConfig(level=lvl, format=_FORMAT, stream=sys.stderr)
    logging.getLogger("issue_radar").setLevel(lvl)
    return lvl
