"""SQLAlchemy adapter package for showsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyShowRepository,
    SqlAlchemyVenueRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyArtistRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyShowRepository",
    "SqlAlchemyVenueRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
