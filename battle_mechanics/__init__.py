"""
Battle Mechanics

Rule-driven battle calculations for turn-based combat: hit and evasion
chances, critical hits, damage with power/resist stats, and luck effects.
Every formula is plain text in the configuration, evaluated in a sandbox.

Quick Start:
    from battle_mechanics import BattleAction, BattleCalculator, BattleConfig, GameDatabase

    database = GameDatabase("data")
    database.load_all()

    calculator = BattleCalculator(BattleConfig(min_damage=1))
    calculator.load_annotations(database.record_sets())

    action = BattleAction(subject=alice, item=database.get_skill(1))
    damage = calculator.compute_damage(action, bob)
"""

__version__ = "0.1.0"
__author__ = "Developer"

# Re-export the public surface for convenience
from battle_mechanics.core import (
    BattleConfig,
    load_config,
    BattleMechanicsError,
    ConfigurationError,
    UnrecognizedStatError,
    MissingFormulaError,
    FormulaEvaluationError,
    InvalidDamageValueError,
    DiagnosticLogger,
)
from battle_mechanics.components import (
    Battler,
    BattlerParams,
    ExParams,
    DataRecord,
    UsableRecord,
    DamageSpec,
    DamageType,
    HitType,
    RecordKind,
    GameVariables,
)
from battle_mechanics.resources import StatId, GameDatabase, load_annotations
from battle_mechanics.battle import BattleAction, BattleCalculator

__all__ = [
    # Config
    "BattleConfig",
    "load_config",
    # Errors
    "BattleMechanicsError",
    "ConfigurationError",
    "UnrecognizedStatError",
    "MissingFormulaError",
    "FormulaEvaluationError",
    "InvalidDamageValueError",
    # Diagnostics
    "DiagnosticLogger",
    # Records and battlers
    "Battler",
    "BattlerParams",
    "ExParams",
    "DataRecord",
    "UsableRecord",
    "DamageSpec",
    "DamageType",
    "HitType",
    "RecordKind",
    "GameVariables",
    # Data
    "StatId",
    "GameDatabase",
    "load_annotations",
    # Calculation
    "BattleAction",
    "BattleCalculator",
]
