"""
Damage pipeline - base formula, power/resist averaging, damage functions,
sign and range clamping.

Order of a damage calculation, with the host's steps in brackets:

 1. Evaluate the skill or item's damage formula (itemDamage).
 2. Apply the Standard or High Resist Damage Function.
 3. Apply the damage/healing sign.
    [element rate, PDR/MDR, recovery rate, critical, variance, guard, rounding]
 4. Clamp the magnitude into [min_damage, max_damage].
"""

from __future__ import annotations

import math
from typing import Any, Optional

from battle_mechanics.battle.stage import CalculationStage
from battle_mechanics.core.errors import FormulaEvaluationError, InvalidDamageValueError
from battle_mechanics.resources.stats import StatId, stat_list_to_string


class DamagePipeline(CalculationStage):
    """Computes signed damage for one action against one target."""

    category = "damage"

    def evaluate_damage(self, action: Any, target: Any) -> float:
        """
        Damage before the host's later steps. Healing is negative.

        Evaluation failures are logged and give 0. Configuration errors
        (a missing formula) propagate.
        """
        try:
            return self._make_damage(action, target)
        except (FormulaEvaluationError, InvalidDamageValueError) as e:
            return self.recover(e)

    def _make_damage(self, action: Any, target: Any) -> float:
        item = action.item
        item_damage = self.evaluate(item.damage.formula, action, target)
        self.trace.log('damage', f"Skill damage formula: {item.damage.formula}")
        self.trace.log('damage', f"Base skill damage: {item_damage}")

        power_stat = self.attack_power(action)
        resist_stat = self.resist_power_of(action, target)

        if power_stat is None and resist_stat is None:
            self.trace.log('damage', "No powerStat or resistStat defined; no Damage Function applied.")
            damage = item_damage
        else:
            power_stat = power_stat or 0.0
            resist_stat = resist_stat or 0.0
            if resist_stat > power_stat:
                damage_function = self.config.high_resist_damage_function
                self.trace.log('damage', f"Using High Resist Damage Function: {damage_function}")
            else:
                damage_function = self.config.standard_damage_function
                self.trace.log('damage', f"Using Standard Damage Function: {damage_function}")
            damage = self.evaluate(
                damage_function,
                action,
                target,
                itemDamage=item_damage,
                powerStat=power_stat,
                resistStat=resist_stat,
            )
            self.trace.log('damage', f"Damage from function: {damage}")

        sign = -1.0 if action.is_recovery() else 1.0
        # + 0.0 turns -0.0 into 0.0
        value = max(damage, 0.0) * sign + 0.0
        self.trace.log('damage', f"Damage, correct sign: {value}")
        if not math.isfinite(value):
            raise InvalidDamageValueError(value)
        return value

    def attack_power(self, action: Any) -> Optional[float]:
        """Average of the subject's power stats; None when the item has none."""
        stats = self.annotations.get(action.item).power_stats
        if not stats:
            self.trace.log('damage', "\tAttack Power: n/a")
            return None
        self.trace.log('damage', f"\tPower Stats: {stat_list_to_string(stats)}")
        average = self._average(action.subject, stats)
        self.trace.log('damage', f"\tAttack Power: {average}")
        return average

    def resist_power_of(self, action: Any, target: Any) -> Optional[float]:
        """Average of the target's resist stats; None when the item has none."""
        stats = self.annotations.get(action.item).resist_stats
        if not stats:
            self.trace.log('damage', "\tResist Power: n/a")
            return None
        self.trace.log('damage', f"\tResist Stats: {stat_list_to_string(stats)}")
        average = self._average(target, stats)
        self.trace.log('damage', f"\tResist Power: {average}")
        return average

    @staticmethod
    def _average(battler: Any, stats: tuple[StatId, ...]) -> float:
        return sum(battler.param(stat) for stat in stats) / len(stats)

    def ensure_damage_in_range(self, action: Any, target: Any, value: float) -> float:
        """
        Clamp a near-final damage value into [min_damage, max_damage].

        The sign is kept; a zero value takes the action's recovery sign.
        A target fully immune to the action's element takes exactly 0
        instead of the minimum.
        """
        self.trace.log('damage', f" Damage, near final: {value}")
        min_damage = self.config.min_damage
        max_damage = self.config.max_damage
        magnitude = abs(value)

        if min_damage <= magnitude <= max_damage:
            result = value
        elif magnitude > max_damage:
            result = -max_damage if value < 0 else max_damage
        elif action.element_rate(target) == 0:
            result = 0
        elif value < 0 or (value == 0 and action.is_recovery()):
            result = -min_damage
        else:
            result = min_damage

        self.trace.log('damage', f"Damage put in range: {result}")
        return result
