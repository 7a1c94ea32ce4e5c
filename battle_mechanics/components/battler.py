"""
Battlers - participants in combat.

The calculation stages only need a small surface from a battler:
param(), trait_objects(), element_rate() and the ex-params named in
formulas. Battler is a ready-made implementation of that surface for
hosts without their own model, and for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import Field

from battle_mechanics.components.records import DataRecord
from battle_mechanics.core.component import Component
from battle_mechanics.resources.stats import StatId


class BattlerParams(Component):
    """
    Base parameters.

    Attributes:
        mhp: Max HP
        mmp: Max MP
        atk: Attack, physical power
        def_: Defense, physical resistance (given as "def")
        mat: Magic attack
        mdf: Magic defense
        agi: Agility
        luk: Luck, affects state success
    """
    mhp: float = 100
    mmp: float = 50
    atk: float = 10
    def_: float = Field(10, alias="def")
    mat: float = 10
    mdf: float = 10
    agi: float = 10
    luk: float = 10


class ExParams(Component):
    """
    Rate parameters summed from traits by the host.

    Attributes:
        hit: Hit rate
        eva: Physical evasion rate
        cri: Critical rate
        cev: Critical evasion rate
        mev: Magical evasion rate
    """
    hit: float = 0.95
    eva: float = 0.05
    cri: float = 0.04
    cev: float = 0.0
    mev: float = 0.0


_PARAM_FIELDS = {
    StatId.MHP: "mhp",
    StatId.MMP: "mmp",
    StatId.ATK: "atk",
    StatId.DEF: "def_",
    StatId.MAT: "mat",
    StatId.MDF: "mdf",
    StatId.AGI: "agi",
    StatId.LUK: "luk",
}


@dataclass
class Battler:
    """
    A participant in battle.

    Attributes:
        name: Display name
        record: The actor or enemy database entry
        params: Base parameters
        ex_params: Hit/evasion/critical rates
        hp: Current HP (defaults to max)
        mp: Current MP (defaults to max)
        class_record: Class entry, for actors
        equips: Equipped weapons and armors
        states: Currently applied states
        element_rates: Damage multiplier per element id
    """
    name: str
    record: Optional[DataRecord] = None
    params: BattlerParams = field(default_factory=BattlerParams)
    ex_params: ExParams = field(default_factory=ExParams)
    hp: Optional[float] = None
    mp: Optional[float] = None
    class_record: Optional[DataRecord] = None
    equips: list[DataRecord] = field(default_factory=list)
    states: list[DataRecord] = field(default_factory=list)
    element_rates: dict[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.hp is None:
            self.hp = self.params.mhp
        if self.mp is None:
            self.mp = self.params.mmp

    def param(self, stat_id: StatId) -> float:
        """Get a stat value by identifier."""
        if stat_id == StatId.HP:
            return self.hp
        if stat_id == StatId.MP:
            return self.mp
        return getattr(self.params, _PARAM_FIELDS[StatId(stat_id)])

    def trait_objects(self) -> list[DataRecord]:
        """Records contributing traits: self, class, equipment, states."""
        sources = [self.record, self.class_record, *self.equips, *self.states]
        return [source for source in sources if source is not None]

    def element_rate(self, element_id: int) -> float:
        """Damage multiplier for an element. 0 means immune."""
        return self.element_rates.get(element_id, 1.0)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    # Parameters, as formulas name them

    @property
    def mhp(self) -> float:
        return self.params.mhp

    @property
    def mmp(self) -> float:
        return self.params.mmp

    @property
    def atk(self) -> float:
        return self.params.atk

    @property
    def def_(self) -> float:
        return self.params.def_

    @property
    def mat(self) -> float:
        return self.params.mat

    @property
    def mdf(self) -> float:
        return self.params.mdf

    @property
    def agi(self) -> float:
        return self.params.agi

    @property
    def luk(self) -> float:
        return self.params.luk

    @property
    def hit(self) -> float:
        return self.ex_params.hit

    @property
    def eva(self) -> float:
        return self.ex_params.eva

    @property
    def cri(self) -> float:
        return self.ex_params.cri

    @property
    def cev(self) -> float:
        return self.ex_params.cev

    @property
    def mev(self) -> float:
        return self.ex_params.mev
