"""
Hit and evasion - the chance an action connects, then the chance it is dodged.
"""

from __future__ import annotations

from typing import Any

from battle_mechanics.battle.stage import CalculationStage
from battle_mechanics.core.errors import FormulaEvaluationError


class HitResolver(CalculationStage):
    """
    Hit probability.

    The raw Hit Rate Formula result is mapped from [0, 1] onto
    [min_hit_rate, max_hit_rate], kept within [0, 1], then multiplied
    by the item's success rate.
    """

    category = "hit"

    def hit_probability(self, action: Any, target: Any) -> float:
        success_rate = action.success_rate
        if action.is_certain_hit():
            self.trace.log('hit', f"Certain Hit. Hit rate = success rate = {success_rate}")
            return success_rate

        if action.is_magical():
            formula = self.config.magical_hit_formula
        else:
            formula = self.config.physical_hit_formula
        self.trace.log('hit', f"Hit formula: {formula}")
        self.trace.log('hit', f"\tSubject Hit Rate: {getattr(action.subject, 'hit', 'n/a')}")

        try:
            raw_rate = self.evaluate(formula, action, target)
        except FormulaEvaluationError as e:
            return self.recover(e)
        self.trace.log('hit', f"Hit rate, rough: {raw_rate}")

        hit_rate = self.config.min_hit_rate + raw_rate * self.config.hit_rate_variance
        self.trace.log('hit', f"Hit rate, adjusted by min/max: {hit_rate}")

        # Low raw rates can push the window below zero
        hit_rate = min(max(hit_rate, 0.0), 1.0) * success_rate
        self.trace.log('hit', f"Hit rate, clamped, * success rate: {hit_rate}")
        return hit_rate


class EvasionResolver(CalculationStage):
    """Evasion probability. Certain hits can't be evaded."""

    category = "evasion"

    def evasion_probability(self, action: Any, target: Any) -> float:
        if action.is_certain_hit():
            self.trace.log('evasion', "Evasion: Can't evade certain hit.")
            return 0.0

        if action.is_magical():
            formula = self.config.magical_evasion_formula
            self.trace.log('evasion', f"\tTarget MEV: {getattr(target, 'mev', 'n/a')}")
        else:
            formula = self.config.physical_evasion_formula
            self.trace.log('evasion', f"\tTarget EVA: {getattr(target, 'eva', 'n/a')}")
        self.trace.log('evasion', f"Evasion Formula: {formula}")

        try:
            evasion = self.evaluate(formula, action, target)
        except FormulaEvaluationError as e:
            return self.recover(e)
        self.trace.log('evasion', f"Evasion Rate: {evasion}")
        return evasion
