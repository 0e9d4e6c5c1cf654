"""Split and assemble markdown export documents.

An export document is a ``---`` delimited YAML frontmatter followed by a
markdown body. The free-text description lives under a ``## Description``
heading and runs until the next ``## `` heading.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, cast

import yaml

from showsync.domain.reconciliation import ParseError

if TYPE_CHECKING:
    from datetime import date

FRONTMATTER_DELIMITER: Final[str] = "---"
DESCRIPTION_HEADING: Final[str] = "Description"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class ExportDocument:
    frontmatter: Mapping[str, object]
    description: str | None = None


def split_document(text: str) -> ExportDocument:
    lines = text.lstrip("\ufeff").splitlines()
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != FRONTMATTER_DELIMITER:
        raise ParseError("Export document is missing its frontmatter")

    try:
        end = next(
            index
            for index in range(start + 1, len(lines))
            if lines[index].strip() == FRONTMATTER_DELIMITER
        )
    except StopIteration as exc:
        raise ParseError("Export document frontmatter is not terminated") from exc

    try:
        frontmatter = yaml.safe_load("\n".join(lines[start + 1 : end]))
    except yaml.YAMLError as exc:
        raise ParseError(f"Invalid frontmatter: {exc}") from exc
    if not isinstance(frontmatter, Mapping):
        raise ParseError("Frontmatter must be a mapping")

    return ExportDocument(
        frontmatter=cast(Mapping[str, object], frontmatter),
        description=_section(lines[end + 1 :], DESCRIPTION_HEADING),
    )


def _section(lines: list[str], heading: str) -> str | None:
    collected: list[str] = []
    collecting = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("## "):
            if collecting:
                break
            collecting = stripped[3:].strip().casefold() == heading.casefold()
            continue
        if collecting:
            collected.append(line.rstrip())
    text = "\n".join(collected).strip()
    return text or None


def render_document(
    frontmatter: Mapping[str, object],
    *,
    heading: str,
    description: str | None = None,
) -> str:
    dumped = yaml.safe_dump(
        dict(frontmatter),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    parts = [FRONTMATTER_DELIMITER, dumped.rstrip("\n"), FRONTMATTER_DELIMITER, "", f"# {heading}"]
    if description:
        parts.extend(["", f"## {DESCRIPTION_HEADING}", "", description.strip()])
    return "\n".join(parts) + "\n"


def slugify(value: str) -> str:
    return _SLUG_PATTERN.sub("-", value.casefold()).strip("-")


def export_filename(day: date, title: str) -> str:
    """``show-YYYY-MM-DD-<title-slug>.md``."""

    slug = slugify(title) or "show"
    return f"show-{day.isoformat()}-{slug}.md"
