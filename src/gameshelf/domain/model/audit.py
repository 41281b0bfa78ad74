"""Audit records for catalog merge decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import new_id, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .enums import EntityType, MergeKind


@dataclass(eq=False)
class EntityMerge:
    """Audit record for folding one catalog entity into another."""

    entity_type: EntityType
    source_id: UUID
    target_id: UUID
    kind: MergeKind
    id: UUID = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
