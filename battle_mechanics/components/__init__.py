"""
Components - data records and battlers consumed by the calculation stages.

All records are Pydantic models containing only data.
Logic lives in the battle stages, not in records.
"""

from battle_mechanics.components.records import (
    DataRecord,
    UsableRecord,
    DamageSpec,
    DamageType,
    HitType,
    RecordKind,
)
from battle_mechanics.components.battler import (
    Battler,
    BattlerParams,
    ExParams,
)
from battle_mechanics.components.variables import GameVariables

__all__ = [
    # Records
    "DataRecord",
    "UsableRecord",
    "DamageSpec",
    "DamageType",
    "HitType",
    "RecordKind",
    # Battler
    "Battler",
    "BattlerParams",
    "ExParams",
    # Variables
    "GameVariables",
]
