"""Pydantic models describing the export document frontmatter."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from showsync.domain.model import SetType, ShowStatus


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _scalar_to_text(value: object) -> object:
    # YAML reads bare zip codes and versions as numbers
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return _blank_to_none(value)


class ExportBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SocialPayload(ExportBaseModel):
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    spotify: str | None = None
    soundcloud: str | None = None
    bandcamp: str | None = None
    website: str | None = None

    _normalize_links = field_validator("*", mode="before")(_blank_to_none)


class ShowPayload(ExportBaseModel):
    event_date: datetime | date | str
    title: str | None = None
    city: str | None = None
    state: str | None = None
    price: float | None = None
    age_requirement: str | None = None
    status: ShowStatus | None = None
    is_sold_out: bool = False
    is_cancelled: bool = False

    _normalize_text = field_validator("title", "city", "state", mode="before")(_blank_to_none)
    _normalize_age = field_validator("age_requirement", mode="before")(_scalar_to_text)


class VenuePayload(ExportBaseModel):
    name: str
    city: str
    state: str
    address: str | None = None
    zipcode: str | None = None
    social: SocialPayload | None = None

    _normalize_text = field_validator("name", "city", "state", "address", mode="before")(
        _blank_to_none
    )
    _normalize_zipcode = field_validator("zipcode", mode="before")(_scalar_to_text)


class ArtistPayload(ExportBaseModel):
    name: str
    position: int = 0
    set_type: SetType = SetType.PERFORMER
    city: str | None = None
    state: str | None = None
    social: SocialPayload | None = None

    _normalize_text = field_validator("name", "city", "state", mode="before")(_blank_to_none)


class ExportFrontmatter(ExportBaseModel):
    show: ShowPayload
    version: str | None = None
    exported_at: datetime | None = None
    venues: list[VenuePayload] = Field(default_factory=list[VenuePayload])
    artists: list[ArtistPayload] = Field(default_factory=list[ArtistPayload])

    _normalize_version = field_validator("version", mode="before")(_scalar_to_text)

    @field_validator("venues", "artists", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value
