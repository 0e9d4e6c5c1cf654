"""Tunables for the import engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_float, env_int

DEFAULT_SUGGESTION_LIMIT: Final[int] = 3
DEFAULT_SUGGESTION_CUTOFF: Final[float] = 80.0


@dataclass(frozen=True, slots=True)
class ImportConfig:
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT
    suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF


def get_import_config() -> ImportConfig:
    """Read matcher tunables from ``SHOWSYNC_SUGGESTION_*`` environment variables."""

    return ImportConfig(
        suggestion_limit=env_int(
            "SHOWSYNC_SUGGESTION_LIMIT",
            DEFAULT_SUGGESTION_LIMIT,
            minimum=0,
        ),
        suggestion_cutoff=env_float(
            "SHOWSYNC_SUGGESTION_CUTOFF",
            DEFAULT_SUGGESTION_CUTOFF,
            minimum=0.0,
        ),
    )
