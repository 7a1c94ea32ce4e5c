"""
Battle calculator - the host-facing entry point.

One calculator is built per loaded configuration. It owns the shared
StageContext and one instance of each calculation stage.

Usage:
    config = load_config("config/battle.json")
    calculator = BattleCalculator(config, variables=game_variables)
    calculator.load_annotations(database.record_sets())

    action = BattleAction(subject=alice, item=fire_skill)
    if random() < calculator.compute_hit_probability(action, bob):
        damage = calculator.evaluate_damage_formula(action, bob)
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from battle_mechanics.battle.critical import CriticalResolver
from battle_mechanics.battle.damage import DamagePipeline
from battle_mechanics.battle.hit import EvasionResolver, HitResolver
from battle_mechanics.battle.luck import LuckEffectResolver
from battle_mechanics.battle.stage import StageContext
from battle_mechanics.components.variables import GameVariables
from battle_mechanics.core.config import BattleConfig
from battle_mechanics.resources.annotations import AnnotationTable

logger = logging.getLogger(__name__)


class BattleCalculator:
    """
    Hit, evasion, critical, damage and luck calculations for one config.

    Attributes:
        context: Shared collaborators of every stage
        damage: Damage pipeline and range clamp
        hit: Hit probability
        evasion: Evasion probability
        critical: Critical rate and critical damage
        luck: Luck effect multiplier
    """

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        variables: Any = None,
        annotations: Optional[AnnotationTable] = None,
    ):
        self.context = StageContext(
            config=config or BattleConfig(),
            annotations=annotations if annotations is not None else AnnotationTable(),
            variables=variables if variables is not None else GameVariables(),
        )
        self.damage = DamagePipeline(self.context)
        self.hit = HitResolver(self.context)
        self.evasion = EvasionResolver(self.context)
        self.critical = CriticalResolver(self.context)
        self.luck = LuckEffectResolver(self.context)

    @property
    def config(self) -> BattleConfig:
        return self.context.config

    @property
    def annotations(self) -> AnnotationTable:
        return self.context.annotations

    def load_annotations(self, record_sets: Iterable[Iterable[Any]]) -> AnnotationTable:
        """
        Parse annotations of all game data. Call once after data loads.

        The table is rebuilt in place, so stages see the new contents
        immediately.

        Raises:
            UnrecognizedStatError: A record names an unknown stat
        """
        self.context.annotations.rebuild(record_sets)
        logger.info(f"Battle calculator has annotations for {len(self.annotations)} records")
        return self.context.annotations

    # Damage

    def evaluate_damage_formula(self, action: Any, target: Any) -> float:
        """Signed damage before the host's later steps and range clamping."""
        return self.damage.evaluate_damage(action, target)

    def apply_damage_range(self, action: Any, target: Any, value: float) -> float:
        """Clamp a near-final damage value into the configured range."""
        return self.damage.ensure_damage_in_range(action, target, value)

    def compute_damage(self, action: Any, target: Any) -> float:
        """
        Signed damage with range clamping applied (healing is negative).

        Hosts that apply element rates, critical hits or variance between
        the two steps call evaluate_damage_formula() and
        apply_damage_range() themselves.
        """
        value = self.evaluate_damage_formula(action, target)
        return self.apply_damage_range(action, target, value)

    # Hit and evasion

    def compute_hit_probability(self, action: Any, target: Any) -> float:
        return self.hit.hit_probability(action, target)

    def compute_evasion_probability(self, action: Any, target: Any) -> float:
        return self.evasion.evasion_probability(action, target)

    # Critical hits

    def compute_critical_probability(self, action: Any, target: Any) -> float:
        return self.critical.critical_hit_probability(action, target)

    def apply_critical_multiplier(self, damage: float, action: Any) -> float:
        return self.critical.apply_critical(damage, action)

    # Luck

    def compute_luck_effect_multiplier(self, action: Any, target: Any) -> float:
        return self.luck.luck_effect_multiplier(action, target)
