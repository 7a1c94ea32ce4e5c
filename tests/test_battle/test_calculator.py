import logging

import pytest

from battle_mechanics.battle.action import BattleAction
from battle_mechanics.battle.calculator import BattleCalculator
from battle_mechanics.components.battler import Battler
from battle_mechanics.components.records import DataRecord, RecordKind
from battle_mechanics.core.config import BattleConfig
from battle_mechanics.core.diagnostics import TRACE_LOGGER_NAME
from battle_mechanics.core.errors import UnrecognizedStatError
from battle_mechanics.resources.annotations import AnnotationTable
from battle_mechanics.resources.stats import StatId


def test_end_to_end_damage(loaded_calculator, strike_action, bob):
    # Attack 8, agility 6 against defense 7, agility 3, base damage 10
    assert loaded_calculator.evaluate_damage_formula(strike_action, bob) == 12.0


def test_without_annotations_base_damage_is_used(calculator, strike_action, bob):
    assert calculator.evaluate_damage_formula(strike_action, bob) == 10.0


def test_load_annotations_updates_stages(calculator, strike, strike_action, bob):
    table = calculator.annotations
    calculator.load_annotations([[strike]])

    assert calculator.annotations is table
    assert calculator.damage.annotations.get(strike).power_stats == (StatId.ATK, StatId.AGI)
    assert calculator.evaluate_damage_formula(strike_action, bob) == 12.0


def test_load_annotations_unknown_stat(calculator):
    record = DataRecord(id=1, name="Odd", kind=RecordKind.SKILL, note="<power stats: foo>")
    with pytest.raises(UnrecognizedStatError):
        calculator.load_annotations([[record]])


def test_shared_annotation_table(strike, strike_action, bob):
    table = AnnotationTable()
    calculator = BattleCalculator(BattleConfig(), annotations=table)
    table.rebuild([[strike]])
    assert calculator.evaluate_damage_formula(strike_action, bob) == 12.0


def test_stages_share_context(calculator):
    stages = [calculator.damage, calculator.hit, calculator.evasion, calculator.critical, calculator.luck]
    assert all(stage.context is calculator.context for stage in stages)
    assert calculator.config is calculator.context.config


def test_default_config():
    assert BattleCalculator().config == BattleConfig()


def test_full_action_sequence(loaded_calculator, strike_action, bob):
    """Hit, evade, damage, crit and clamp for one strike."""
    calculator = loaded_calculator

    hit = calculator.compute_hit_probability(strike_action, bob)
    evade = calculator.compute_evasion_probability(strike_action, bob)
    crit = calculator.compute_critical_probability(strike_action, bob)
    assert hit == pytest.approx(1.0)
    assert evade == pytest.approx(0.1)
    assert crit == pytest.approx(0.05)

    damage = calculator.evaluate_damage_formula(strike_action, bob)
    damage *= strike_action.element_rate(bob)
    damage = calculator.apply_critical_multiplier(damage, strike_action)
    assert calculator.apply_damage_range(strike_action, bob, damage) == pytest.approx(36)


def test_state_sharing_actor_id_is_not_counted(loaded_calculator, strike_action, alice):
    focus = DataRecord(id=1, name="Focus", kind=RecordKind.STATE, note="<crit boost: 50>")
    loaded_calculator.load_annotations([[strike_action.item], [alice.record], [focus]])

    assert loaded_calculator.apply_critical_multiplier(10, strike_action) == pytest.approx(30)
    alice.states.append(focus)
    assert loaded_calculator.apply_critical_multiplier(10, strike_action) == pytest.approx(35)


def test_crit_boost_from_equipment(loaded_calculator, strike_action, alice):
    amulet = DataRecord(id=5, name="Amulet", kind=RecordKind.ARMOR, note="<crit boost: 100>")
    loaded_calculator.load_annotations([[strike_action.item], [amulet]])
    alice.equips.append(amulet)

    assert loaded_calculator.apply_critical_multiplier(10, strike_action) == pytest.approx(40)


def test_traces_with_all_categories(strike, alice, bob, caplog):
    caplog.set_level(logging.INFO, logger=TRACE_LOGGER_NAME)
    calculator = BattleCalculator(BattleConfig(log_categories=["all"]))
    calculator.load_annotations([[strike]])
    action = BattleAction(subject=alice, item=strike)

    calculator.compute_hit_probability(action, bob)
    calculator.compute_critical_probability(action, bob)
    calculator.compute_luck_effect_multiplier(action, bob)

    assert "Hit formula" in caplog.text
    assert "Crit Rate Formula" in caplog.text
    assert "Luck Effect Rate" in caplog.text


def test_silent_by_default(loaded_calculator, strike_action, bob, caplog):
    caplog.set_level(logging.INFO, logger=TRACE_LOGGER_NAME)
    loaded_calculator.evaluate_damage_formula(strike_action, bob)
    loaded_calculator.compute_hit_probability(strike_action, bob)
    assert not [r for r in caplog.records if r.name == TRACE_LOGGER_NAME]


def test_reference_battler_surface():
    hero = Battler(name="Hero")
    assert hero.hp == hero.mhp
    assert hero.param(StatId.HP) == hero.hp
    assert hero.param(StatId.DEF) == hero.def_
    assert hero.element_rate(4) == 1.0
    assert hero.trait_objects() == []
    assert hero.is_alive
