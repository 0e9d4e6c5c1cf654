"""Pydantic models describing discovery scraper output."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _scalar_to_text(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return _blank_to_none(value)


class DiscoveryBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DiscoveredEvent(DiscoveryBaseModel):
    event_id: str | None = Field(default=None, alias="id")
    title: str | None = None
    date: str | None = None
    venue: str | None = None
    venue_slug: str | None = Field(default=None, alias="venueSlug")
    city: str | None = None
    state: str | None = None
    address: str | None = None
    doors_time: str | None = Field(default=None, alias="doorsTime")
    show_time: str | None = Field(default=None, alias="showTime")
    ticket_url: str | None = Field(default=None, alias="ticketUrl")
    image_url: str | None = Field(default=None, alias="imageUrl")
    artists: list[str] = Field(default_factory=list[str])
    scraped_at: datetime | None = Field(default=None, alias="scrapedAt")
    price: str | None = None
    age_restriction: str | None = Field(default=None, alias="ageRestriction")
    is_sold_out: bool = Field(default=False, alias="isSoldOut")
    is_cancelled: bool = Field(default=False, alias="isCancelled")

    _normalize_text = field_validator(
        "title",
        "venue",
        "venue_slug",
        "city",
        "state",
        "address",
        "doors_time",
        "show_time",
        "ticket_url",
        "image_url",
        mode="before",
    )(_blank_to_none)
    _normalize_scalars = field_validator(
        "event_id",
        "date",
        "price",
        "age_restriction",
        mode="before",
    )(_scalar_to_text)

    @field_validator("scraped_at", mode="before")
    @classmethod
    def _blank_timestamp(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("is_sold_out", "is_cancelled", mode="before")
    @classmethod
    def _none_to_false(cls, value: object) -> object:
        return False if value is None else value

    @field_validator("artists", mode="before")
    @classmethod
    def _artist_names(cls, value: object) -> object:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        names: list[object] = []
        for item in cast(list[object], value):
            if isinstance(item, Mapping):
                item = cast(Mapping[str, object], item).get("name")
            if isinstance(item, str) and item.strip():
                names.append(item.strip())
        return names
