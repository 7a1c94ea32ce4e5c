"""
Component base class for data-only records.

Records are pure data containers. All calculation logic lives in the
battle stages, which read records but never write to them. This keeps:
- Host data free of calculation caches
- Serialization trivial
- Testing easier

Usage:
    class SkillRecord(Component):
        id: int
        name: str
        note: str = ""
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all data records.

    Components are data-only containers using Pydantic for:
    - Automatic validation
    - JSON serialization
    - Type hints
    - Default values

    IMPORTANT: Do NOT add methods that modify state.
    """

    model_config = ConfigDict(
        # Allow arbitrary types (for references)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Unknown fields are authoring mistakes
        extra='forbid',
        populate_by_name=True,
    )


class FrozenComponent(Component):
    """Component whose fields can not be reassigned after construction."""

    model_config = ConfigDict(frozen=True)
