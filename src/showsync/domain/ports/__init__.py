"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ArtistRepository, Repository, ShowRepository, VenueRepository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArtistRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "ShowRepository",
    "UnitOfWork",
    "VenueRepository",
]
