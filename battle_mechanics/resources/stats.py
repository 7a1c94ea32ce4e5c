"""
Stat identifiers and the alias table used by annotations.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, Mapping

from battle_mechanics.core.errors import UnrecognizedStatError


class StatId(IntEnum):
    """
    Canonical battler stats.

    The first eight match the host's param() indices.
    HP and MP are the current values.
    """
    MHP = 0
    MMP = 1
    ATK = 2
    DEF = 3
    MAT = 4
    MDF = 5
    AGI = 6
    LUK = 7
    HP = 8
    MP = 9

    @property
    def display_name(self) -> str:
        return STAT_DISPLAY_NAMES[self]


STAT_DISPLAY_NAMES: Mapping[StatId, str] = MappingProxyType({
    StatId.MHP: "Max HP",
    StatId.MMP: "Max MP",
    StatId.ATK: "Attack",
    StatId.DEF: "Defense",
    StatId.MAT: "M.Attack",
    StatId.MDF: "M.Defense",
    StatId.AGI: "Agility",
    StatId.LUK: "Luck",
    StatId.HP: "HP",
    StatId.MP: "MP",
})

# Lowercase three-letter prefix -> stat. Several aliases share a stat.
STAT_ALIASES: Mapping[str, StatId] = MappingProxyType({
    'mhp': StatId.MHP,
    'mmp': StatId.MMP,
    'atk': StatId.ATK, 'pow': StatId.ATK, 'str': StatId.ATK,
    'def': StatId.DEF,
    'mat': StatId.MAT, 'mag': StatId.MAT, 'int': StatId.MAT,
    'mdf': StatId.MDF, 'res': StatId.MDF, 'wis': StatId.MDF, 'mgr': StatId.MDF,
    'agi': StatId.AGI, 'spd': StatId.AGI, 'dex': StatId.AGI,
    'luk': StatId.LUK,
    'hp': StatId.HP,
    'mp': StatId.MP,
})


def resolve_stat(name: str) -> StatId:
    """
    Resolve a human-readable stat name.

    Only the first three letters matter, so "Agility", "agi" and "AGIL"
    are all the same stat.

    Raises:
        UnrecognizedStatError: The prefix is not in the alias table
    """
    prefix = name[:3].lower()
    try:
        return STAT_ALIASES[prefix]
    except KeyError:
        raise UnrecognizedStatError(name) from None


def stat_list_to_string(stats: Iterable[StatId]) -> str:
    """Display names joined for traces: 'Attack, Agility'."""
    return ", ".join(stat.display_name for stat in stats)
