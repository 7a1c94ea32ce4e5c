"""
Critical hits - how likely they are, and what they do to damage.
"""

from __future__ import annotations

from typing import Any

from battle_mechanics.battle.stage import CalculationStage
from battle_mechanics.core.errors import FormulaEvaluationError


class CriticalResolver(CalculationStage):
    """
    Critical hit rate and critical damage.

    The default formulas read the item's <crit mod> through
    action.critMod, and the <crit boost> totals through
    subject.critBoost (all trait sources) and action.critBoost (the item).
    """

    category = "critical"

    def critical_hit_probability(self, action: Any, target: Any) -> float:
        """Chance of a critical hit. 0 for items that can't crit."""
        if not action.is_critical_allowed():
            self.trace.log('critical hit', "Critical Hit Rate: n/a")
            return 0.0

        formula = self.config.critical_rate_formula
        self.trace.log('critical hit', f"Crit Rate Formula: {formula}")
        self.trace.log('critical hit', f"\tSubject crit rate: {getattr(action.subject, 'cri', 'n/a')}")
        self.trace.log('critical hit', f"\tTarget crit evade: {getattr(target, 'cev', 'n/a')}")

        try:
            crit_rate = self.evaluate(formula, action, target)
        except FormulaEvaluationError as e:
            # NaN results land here too
            return self.recover(e)
        self.trace.log('critical hit', f"Critical Hit Rate: {crit_rate}")
        return crit_rate

    def apply_critical(self, damage: float, action: Any) -> float:
        """
        Damage after a critical hit. Not clamped; range clamping is
        applied later in the host's damage sequence.
        """
        formula = self.config.critical_damage_formula
        self.trace.log('critical damage', f"Crit Damage Formula: {formula}")
        self.trace.log('critical damage', f" Pre-crit damage: {damage}")

        try:
            crit_damage = self.evaluate(formula, action, None, damage=damage)
        except FormulaEvaluationError as e:
            self.recover(e, damage)
            return damage
        self.trace.log('critical damage', f"Damage with crit: {crit_damage}")
        return crit_damage
