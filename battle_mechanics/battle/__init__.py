"""
Battle - calculation stages and the calculator facade.
"""

from battle_mechanics.battle.action import BattleAction, ActionView, BattlerView
from battle_mechanics.battle.aggregator import ModifierAggregator, TraitBearer
from battle_mechanics.battle.stage import CalculationStage, StageContext
from battle_mechanics.battle.damage import DamagePipeline
from battle_mechanics.battle.hit import HitResolver, EvasionResolver
from battle_mechanics.battle.critical import CriticalResolver
from battle_mechanics.battle.luck import LuckEffectResolver
from battle_mechanics.battle.calculator import BattleCalculator

__all__ = [
    # Action
    "BattleAction",
    "ActionView",
    "BattlerView",
    # Aggregation
    "ModifierAggregator",
    "TraitBearer",
    # Stages
    "CalculationStage",
    "StageContext",
    "DamagePipeline",
    "HitResolver",
    "EvasionResolver",
    "CriticalResolver",
    "LuckEffectResolver",
    # Facade
    "BattleCalculator",
]
