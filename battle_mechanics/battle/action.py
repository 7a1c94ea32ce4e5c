"""
Battle actions - one subject using one skill or item.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from battle_mechanics.components.records import DamageType, HitType, UsableRecord

if TYPE_CHECKING:
    from battle_mechanics.battle.aggregator import ModifierAggregator
    from battle_mechanics.core.diagnostics import DiagnosticLogger
    from battle_mechanics.resources.annotations import AnnotationTable


@dataclass
class BattleAction:
    """
    Action context for one attempted use of a skill or item.

    Created by the host per evaluation and discarded afterwards.

    Attributes:
        subject: The battler performing the action
        item: The skill or item being used
    """
    subject: Any
    item: UsableRecord

    @property
    def success_rate(self) -> float:
        """Success rate as a fraction, within [0, 1]."""
        return min(max(self.item.success_rate, 0), 100) * 0.01

    def is_certain_hit(self) -> bool:
        return self.item.hit_type == HitType.CERTAIN

    def is_physical(self) -> bool:
        return self.item.hit_type == HitType.PHYSICAL

    def is_magical(self) -> bool:
        return self.item.hit_type == HitType.MAGICAL

    def damage_type(self) -> DamageType:
        return DamageType(self.item.damage.type)

    def is_recovery(self) -> bool:
        return self.damage_type().is_recovery

    def is_critical_allowed(self) -> bool:
        return self.item.damage.critical

    def element_rate(self, target: Any) -> float:
        """Target's damage multiplier for this action's element."""
        return target.element_rate(self.item.damage.element_id)


class ActionView:
    """
    The `action` seen by formulas.

    Adds hitMod, critMod and critBoost from the used item's annotations,
    and shows the subject as a BattlerView; everything else reads through
    to the action.
    """

    def __init__(
        self,
        action: Any,
        annotations: AnnotationTable,
        trace: DiagnosticLogger,
        aggregator: ModifierAggregator,
    ):
        self._action = action
        self._annotations = annotations
        self._trace = trace
        self._aggregator = aggregator

    def __getattr__(self, name: str) -> Any:
        return getattr(self._action, name)

    @property
    def subject(self) -> BattlerView:
        return BattlerView(self._action.subject, self._aggregator)

    @property
    def hitMod(self) -> float:
        hit_mod = self._annotations.get(self._action.item).hit_mod
        self._trace.log('hit', f"\tItem Hit Mod: {hit_mod}")
        return hit_mod

    @property
    def critMod(self) -> float:
        crit_mod = self._annotations.get(self._action.item).crit_mod
        self._trace.log('critical hit', f"\tItem Crit Mod: {crit_mod}")
        return crit_mod

    @property
    def critBoost(self) -> float:
        crit_boost = self._annotations.get(self._action.item).crit_boost
        self._trace.log('critical damage', f"\tSkill Crit Boost: {crit_boost}")
        return crit_boost


class BattlerView:
    """
    A battler as seen by formulas (`subject`, `target`, `a`, `b`).

    Adds critBoost, summed over the battler's trait sources; everything
    else reads through to the battler.
    """

    def __init__(self, battler: Any, aggregator: ModifierAggregator):
        self._battler = battler
        self._aggregator = aggregator

    def __getattr__(self, name: str) -> Any:
        return getattr(self._battler, name)

    @property
    def critBoost(self) -> float:
        return self._aggregator.aggregate(self._battler, "critBoost")
