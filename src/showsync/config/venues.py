"""Registry of venues known to the discovery scrapers.

Discovery records identify their venue by slug and often omit the address or
the city. The registry fills those gaps. Operators can add venues through a
YAML file referenced by ``SHOWSYNC_VENUES_FILE``::

    venues:
      the-rebel-lounge:
        name: The Rebel Lounge
        city: Phoenix
        state: AZ
        address: 2303 E Indian School Rd
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final, cast

import yaml

from .env import optional_env_var
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class KnownVenue:
    slug: str
    name: str
    city: str
    state: str
    address: str | None = None


DEFAULT_VENUES: Final[tuple[KnownVenue, ...]] = (
    KnownVenue(
        slug="valley-bar",
        name="Valley Bar",
        city="Phoenix",
        state="AZ",
        address="130 N Central Ave",
    ),
    KnownVenue(
        slug="crescent-ballroom",
        name="Crescent Ballroom",
        city="Phoenix",
        state="AZ",
        address="308 N 2nd Ave",
    ),
    KnownVenue(
        slug="the-van-buren",
        name="The Van Buren",
        city="Phoenix",
        state="AZ",
        address="401 W Van Buren St",
    ),
    KnownVenue(
        slug="celebrity-theatre",
        name="Celebrity Theatre",
        city="Phoenix",
        state="AZ",
        address="440 N 32nd St",
    ),
    KnownVenue(
        slug="arizona-financial-theatre",
        name="Arizona Financial Theatre",
        city="Phoenix",
        state="AZ",
        address="400 W Washington St",
    ),
)


class VenueRegistry:
    """Slug-indexed lookup of known discovery venues."""

    def __init__(self, venues: Mapping[str, KnownVenue] | None = None) -> None:
        self._venues: dict[str, KnownVenue] = dict(venues or {})

    @classmethod
    def defaults(cls) -> VenueRegistry:
        return cls({venue.slug: venue for venue in DEFAULT_VENUES})

    def get(self, slug: str) -> KnownVenue | None:
        return self._venues.get(slug.strip().lower())

    def with_venues(self, venues: Mapping[str, KnownVenue]) -> VenueRegistry:
        merged = dict(self._venues)
        merged.update(venues)
        return VenueRegistry(merged)

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and slug.strip().lower() in self._venues

    def __iter__(self) -> Iterator[KnownVenue]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)


def _parse_venue_entry(slug: str, entry: object) -> KnownVenue:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Venue '{slug}' must be a mapping")
    data = cast(Mapping[str, object], entry)
    values: dict[str, str | None] = {}
    for key in ("name", "city", "state", "address"):
        raw = data.get(key)
        values[key] = str(raw).strip() if raw is not None else None
    name, city, state = values["name"], values["city"], values["state"]
    if not name or not city or not state:
        raise ConfigurationError(f"Venue '{slug}' requires name, city and state")
    return KnownVenue(
        slug=slug.strip().lower(),
        name=name,
        city=city,
        state=state,
        address=values["address"] or None,
    )


def load_venue_file(path: Path) -> dict[str, KnownVenue]:
    """Parse a YAML venue file into registry entries."""

    if not path.exists():
        raise ConfigurationError(f"Missing venue file at {path}")
    with path.open(encoding="utf-8") as handle:
        try:
            document = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid venue file {path}: {exc}") from exc

    if document is None:
        return {}
    if not isinstance(document, Mapping):
        raise ConfigurationError(f"Venue file {path} must contain a mapping")
    venues_section = cast(Mapping[str, object], document).get("venues") or {}
    if not isinstance(venues_section, Mapping):
        raise ConfigurationError(f"'venues' in {path} must be a mapping")

    entries = cast(Mapping[object, object], venues_section)
    return {
        str(slug).strip().lower(): _parse_venue_entry(str(slug), entry)
        for slug, entry in entries.items()
    }


def get_venue_registry(*, path: Path | None = None) -> VenueRegistry:
    """Return the built-in registry extended by ``SHOWSYNC_VENUES_FILE`` if set."""

    registry = VenueRegistry.defaults()
    if path is None:
        env_path = optional_env_var("SHOWSYNC_VENUES_FILE")
        path = Path(env_path) if env_path else None
    if path is None:
        return registry
    return registry.with_venues(load_venue_file(path))
