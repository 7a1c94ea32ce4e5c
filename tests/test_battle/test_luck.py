import pytest

from battle_mechanics.battle.calculator import BattleCalculator
from battle_mechanics.core.config import BattleConfig
from battle_mechanics.core.errors import MissingFormulaError


def test_default_luck_effect(calculator, strike_action, bob):
    # 1.0 + (20 - 10) * 0.001
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == pytest.approx(1.01)


def test_luck_effect_floored_at_zero(strike_action, bob):
    calculator = BattleCalculator(BattleConfig(luck_effect_formula="(subject.luk - target.luk) * -1"))
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == 0.0


def test_luck_effect_has_no_upper_bound(strike_action, bob):
    calculator = BattleCalculator(BattleConfig(luck_effect_formula="subject.luk"))
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == 20.0


def test_luck_effect_reads_game_variables(variables, strike_action, bob):
    variables[7] = 2
    calculator = BattleCalculator(BattleConfig(luck_effect_formula="v[7] * 0.5"), variables=variables)
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == 1.0


def test_luck_effect_error_gives_zero(strike_action, bob, caplog):
    calculator = BattleCalculator(BattleConfig(luck_effect_formula="subject.luk / (target.luk - 10)"))
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == 0.0
    assert "LuckEffectResolver" in caplog.text


def test_missing_luck_formula_propagates(strike_action, bob):
    calculator = BattleCalculator(BattleConfig(luck_effect_formula=""))
    with pytest.raises(MissingFormulaError):
        calculator.compute_luck_effect_multiplier(strike_action, bob)


def test_oversized_luck_result_gives_zero(strike_action, bob):
    calculator = BattleCalculator(BattleConfig(luck_effect_formula="1" + "0" * 400))
    assert calculator.compute_luck_effect_multiplier(strike_action, bob) == 0.0
