"""Social and web links attached to artists and venues."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Final

SOCIAL_KEYS: Final[tuple[str, ...]] = (
    "instagram",
    "facebook",
    "twitter",
    "youtube",
    "spotify",
    "soundcloud",
    "bandcamp",
    "website",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class SocialLinks:
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    spotify: str | None = None
    soundcloud: str | None = None
    bandcamp: str | None = None
    website: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))

    def as_dict(self) -> dict[str, str]:
        """Return only the links that are set, in declaration order."""

        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> SocialLinks:
        if not data:
            return cls()
        values: dict[str, str] = {}
        for key in SOCIAL_KEYS:
            raw = data.get(key)
            if isinstance(raw, str) and raw.strip():
                values[key] = raw.strip()
        return cls(**values)
