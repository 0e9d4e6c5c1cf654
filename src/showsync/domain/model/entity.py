"""
Base building block:
storage-assigned integer identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from showsync.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity is assigned by the catalog store when the entity is first flushed."""

    id: int | None = None

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def require_id(self) -> int:
        if self.id is None:
            raise ValueError(f"{self.ENTITY_TYPE} has not been persisted yet")
        return self.id
