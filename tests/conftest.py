import pytest

from battle_mechanics.battle.action import BattleAction
from battle_mechanics.battle.calculator import BattleCalculator
from battle_mechanics.components.battler import Battler, BattlerParams, ExParams
from battle_mechanics.components.records import (
    DamageSpec,
    DamageType,
    DataRecord,
    HitType,
    RecordKind,
    UsableRecord,
)
from battle_mechanics.components.variables import GameVariables
from battle_mechanics.core.config import BattleConfig


@pytest.fixture
def config():
    """Default configuration."""
    return BattleConfig()


@pytest.fixture
def variables():
    return GameVariables()


@pytest.fixture
def calculator(config, variables):
    """Calculator with an empty annotation table."""
    return BattleCalculator(config, variables=variables)


@pytest.fixture
def alice():
    """Subject: attack 8, agility 6."""
    return Battler(
        name="Alice",
        record=DataRecord(id=1, name="Alice", kind=RecordKind.ACTOR),
        params=BattlerParams(atk=8, agi=6, luk=20),
        ex_params=ExParams(hit=0.9, cri=0.1),
    )


@pytest.fixture
def bob():
    """Target: defense 7, agility 3."""
    return Battler(
        name="Bob",
        record=DataRecord(id=1, name="Bob", kind=RecordKind.ENEMY),
        params=BattlerParams(**{"def": 7}, agi=3, luk=10),
        ex_params=ExParams(eva=0.1, mev=0.05, cev=0.5),
    )


@pytest.fixture
def strike():
    """Physical skill with power and resist stats, base damage 10."""
    return UsableRecord(
        id=1,
        name="Strike",
        note="<power stats: atk, agi>\n<resist stats: def, agi>",
        damage=DamageSpec(type=DamageType.HP_DAMAGE, formula="10", critical=True),
        hit_type=HitType.PHYSICAL,
    )


@pytest.fixture
def heal():
    """Recovery skill that always hits."""
    return UsableRecord(
        id=2,
        name="Heal",
        note="",
        damage=DamageSpec(type=DamageType.HP_RECOVER, formula="25"),
        hit_type=HitType.CERTAIN,
    )


@pytest.fixture
def strike_action(alice, strike):
    return BattleAction(subject=alice, item=strike)


@pytest.fixture
def loaded_calculator(calculator, strike, heal, alice, bob):
    """Calculator with annotations parsed for the sample records."""
    records = [strike, heal]
    others = [alice.record, bob.record]
    calculator.load_annotations([records, others])
    return calculator
