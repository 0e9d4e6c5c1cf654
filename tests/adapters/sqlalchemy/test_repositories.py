"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session  # noqa: TC002

from showsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyShowRepository,
    SqlAlchemyVenueRepository,
)
from showsync.domain.model import Artist, SetType, Show, ShowSource, Venue

DAY = date(2025, 3, 1)


def _show(
    session: Session,
    headliner: Artist,
    *venues: Venue,
    day: date = DAY,
    origin: str | None = None,
    event_id: str | None = None,
) -> Show:
    show = Show(
        event_date=day,
        source=ShowSource.DISCOVERY if origin else ShowSource.USER,
        source_origin=origin,
        source_event_id=event_id,
    )
    show.add_artist(headliner, position=0, set_type=SetType.HEADLINER)
    for venue in venues:
        show.add_venue(venue)
    SqlAlchemyShowRepository(session).add(show)
    return show


def test_artist_lookup_ignores_case_and_spacing(sqlite_session: Session) -> None:
    repository = SqlAlchemyArtistRepository(sqlite_session)
    artist = Artist(name="The Headliners")
    repository.add(artist)

    assert artist.id is not None
    assert repository.find_by_name("  the   HEADLINERS ") is artist
    assert repository.find_by_name("Headliners") is None


def test_artist_list_is_ordered_by_id(sqlite_session: Session) -> None:
    repository = SqlAlchemyArtistRepository(sqlite_session)
    for name in ("Night Owls", "Early Birds", "The Headliners"):
        repository.add(Artist(name=name))

    assert [artist.name for artist in repository.list_all()] == [
        "Night Owls",
        "Early Birds",
        "The Headliners",
    ]


def test_venue_lookup_requires_matching_city(sqlite_session: Session) -> None:
    repository = SqlAlchemyVenueRepository(sqlite_session)
    phoenix = Venue(name="Valley Bar", city="Phoenix", state="AZ")
    tucson = Venue(name="Valley Bar", city="Tucson", state="AZ")
    repository.add(phoenix)
    repository.add(tucson)

    assert repository.find_by_name_and_city("valley bar", "PHOENIX") is phoenix
    assert repository.find_by_name_and_city("Valley Bar", "Tucson") is tucson
    assert repository.find_by_name_and_city("Valley Bar", "Tempe") is None


def test_renamed_artist_keeps_lookup_key_in_sync(sqlite_session: Session) -> None:
    repository = SqlAlchemyArtistRepository(sqlite_session)
    artist = Artist(name="Night Owls")
    repository.add(artist)

    artist.name = "Night Owls Revue"
    sqlite_session.flush()

    assert repository.find_by_name("night owls revue") is artist
    assert repository.find_by_name("night owls") is None


def test_shows_by_venue_and_date(sqlite_session: Session) -> None:
    headliner = Artist(name="The Headliners")
    valley_bar = Venue(name="Valley Bar", city="Phoenix", state="AZ")
    crescent = Venue(name="Crescent Ballroom", city="Phoenix", state="AZ")
    SqlAlchemyArtistRepository(sqlite_session).add(headliner)
    venues = SqlAlchemyVenueRepository(sqlite_session)
    venues.add(valley_bar)
    venues.add(crescent)
    first = _show(sqlite_session, headliner, valley_bar)
    second = _show(sqlite_session, headliner, crescent, valley_bar)
    _show(sqlite_session, headliner, valley_bar, day=date(2025, 3, 2))

    repository = SqlAlchemyShowRepository(sqlite_session)

    assert list(repository.list_by_venue_and_date(valley_bar.require_id(), DAY)) == [
        first,
        second,
    ]
    assert (
        repository.find_by_headliner_venue_date(
            headliner.require_id(), valley_bar.require_id(), DAY
        )
        is first
    )
    assert (
        repository.find_by_headliner_venue_date(headliner.require_id(), crescent.require_id(), DAY)
        is second
    )


def test_find_by_source_id(sqlite_session: Session) -> None:
    headliner = Artist(name="The Headliners")
    venue = Venue(name="Valley Bar", city="Phoenix", state="AZ")
    SqlAlchemyArtistRepository(sqlite_session).add(headliner)
    SqlAlchemyVenueRepository(sqlite_session).add(venue)
    show = _show(sqlite_session, headliner, venue, origin="valley-bar", event_id="evt-1")

    repository = SqlAlchemyShowRepository(sqlite_session)

    assert repository.find_by_source_id("valley-bar", "evt-1") is show
    assert repository.find_by_source_id("valley-bar", "evt-2") is None
    assert repository.find_by_source_id("crescent-ballroom", "evt-1") is None


def test_show_update_flushes_changes(sqlite_session: Session) -> None:
    headliner = Artist(name="The Headliners")
    venue = Venue(name="Valley Bar", city="Phoenix", state="AZ")
    SqlAlchemyArtistRepository(sqlite_session).add(headliner)
    SqlAlchemyVenueRepository(sqlite_session).add(venue)
    show = _show(sqlite_session, headliner, venue)
    repository = SqlAlchemyShowRepository(sqlite_session)

    show.is_sold_out = True
    repository.update(show)
    sqlite_session.expire(show)

    stored = repository.get(show.require_id())
    assert stored is not None
    assert stored.is_sold_out is True
