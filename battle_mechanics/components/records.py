"""
Game data records - skills, items, actors, classes, equipment, states.

Records are read-only inputs. Parsed annotations live in a separate
table keyed by record, never on the record itself.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Union

from pydantic import AliasChoices, Field

from battle_mechanics.core.component import Component


class RecordKind(str, Enum):
    """Database a record belongs to."""
    ACTOR = "actor"
    CLASS = "class"
    SKILL = "skill"
    ITEM = "item"
    WEAPON = "weapon"
    ARMOR = "armor"
    ENEMY = "enemy"
    STATE = "state"

    @property
    def is_usable(self) -> bool:
        """Skills and items can be used as actions."""
        return self in (RecordKind.SKILL, RecordKind.ITEM)


class DamageType(IntEnum):
    """What an action's damage formula affects."""
    NONE = 0
    HP_DAMAGE = 1
    MP_DAMAGE = 2
    HP_RECOVER = 3
    MP_RECOVER = 4
    HP_DRAIN = 5
    MP_DRAIN = 6

    @property
    def is_recovery(self) -> bool:
        return self in (DamageType.HP_RECOVER, DamageType.MP_RECOVER)


class HitType(IntEnum):
    """Attack category of an action."""
    CERTAIN = 0
    PHYSICAL = 1
    MAGICAL = 2


RecordId = Union[int, str]


class DataRecord(Component):
    """
    Any database entry that can carry annotations.

    Attributes:
        id: Identifier, unique within its kind
        name: Display name
        note: Free-text annotation field
        kind: Database this record belongs to
    """
    id: RecordId
    name: str = ""
    note: str = ""
    kind: RecordKind

    @property
    def key(self) -> tuple[RecordKind, RecordId]:
        """Identity used by annotation tables."""
        return (self.kind, self.id)


class DamageSpec(Component):
    """
    Damage settings of a skill or item.

    Attributes:
        type: What the damage affects
        formula: Base damage formula (itemDamage)
        element_id: Element used for the target's element rate
        critical: Whether the action can score a critical hit
        variance: Random variance percent, applied by the host
    """
    type: DamageType = DamageType.NONE
    formula: str = "0"
    element_id: int = Field(0, validation_alias=AliasChoices("element_id", "elementId"))
    critical: bool = False
    variance: int = 20


class UsableRecord(DataRecord):
    """
    Skill or item used by an action.

    Attributes:
        damage: Damage settings
        success_rate: Chance to succeed, in percent (0-100)
        hit_type: Certain hit, physical or magical
    """
    kind: RecordKind = RecordKind.SKILL
    damage: DamageSpec = Field(default_factory=DamageSpec)
    success_rate: float = Field(
        100, ge=0, le=100, validation_alias=AliasChoices("success_rate", "successRate")
    )
    hit_type: HitType = Field(HitType.PHYSICAL, validation_alias=AliasChoices("hit_type", "hitType"))
