"""
Luck effect - multiplier on state and debuff success rates.
"""

from __future__ import annotations

from typing import Any

from battle_mechanics.battle.stage import CalculationStage
from battle_mechanics.core.errors import FormulaEvaluationError


class LuckEffectResolver(CalculationStage):
    """Evaluates the Luck Effect Rate Formula. Never negative, no upper bound."""

    category = "luck"

    def luck_effect_multiplier(self, action: Any, target: Any) -> float:
        formula = self.config.luck_effect_formula
        self.trace.log('luck', f"Luck Effect Formula: {formula}")
        self.trace.log('luck', f"\tSubject Luck: {getattr(action.subject, 'luk', 'n/a')}")
        self.trace.log('luck', f"\tTarget Luck: {getattr(target, 'luk', 'n/a')}")

        try:
            rate = self.evaluate(formula, action, target)
        except FormulaEvaluationError as e:
            return self.recover(e)

        rate = max(rate, 0.0)
        self.trace.log('luck', f"Luck Effect Rate: {rate}")
        return rate
