"""
Annotation parsing - typed modifiers from free-text record notes.

Recognized tags (case insensitive, space/hyphen between words optional):

    <power stats: atk, agi>    skills/items  stats averaged from the subject
    <resist stat: mdf>         skills/items  stats averaged from the target
    <hit mod: +5%>             skills/items  hit rate offset, percent points
    <crit mod: -2>             skills/items  crit rate offset, percent points
    <crit boost: 10>           any record    crit damage offset, percent points

A missing or malformed tag falls back to its default (empty list or 0).
An unknown stat name inside a stat list is a configuration error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Generic, Hashable, Iterable, Mapping, Optional, TypeVar

from battle_mechanics.components.records import RecordKind
from battle_mechanics.core.errors import ConfigurationError
from battle_mechanics.resources.stats import StatId, resolve_stat

logger = logging.getLogger(__name__)

T = TypeVar('T')

_NUMBER = r"([+\-]?\d+(?:\.\d+)?%?)"
_STAT_LIST = r"([a-z]+)(?:(?:,\s*|\s+)([a-z]+))?"

POWER_STATS_PATTERN = re.compile(rf"<power[ \-]?stats?:\s*{_STAT_LIST}\s*>", re.IGNORECASE)
RESIST_STATS_PATTERN = re.compile(rf"<resist[ \-]?stats?:\s*{_STAT_LIST}\s*>", re.IGNORECASE)
HIT_MOD_PATTERN = re.compile(rf"<hit[ \-]?mod:?\s*{_NUMBER}\s*>", re.IGNORECASE)
CRIT_MOD_PATTERN = re.compile(rf"<crit[ \-]?mod:?\s*{_NUMBER}\s*>", re.IGNORECASE)
CRIT_BOOST_PATTERN = re.compile(
    rf"<crit[ \-]?(?:pow|power|boost):?\s*{_NUMBER}\s*>", re.IGNORECASE
)


@dataclass(frozen=True)
class AnnotationResult(Generic[T]):
    """Outcome of parsing one tag: a value, or the error that prevented it."""
    value: Optional[T] = None
    error: Optional[ConfigurationError] = None

    @classmethod
    def ok(cls, value: T) -> AnnotationResult[T]:
        return cls(value=value)

    @classmethod
    def err(cls, error: ConfigurationError) -> AnnotationResult[T]:
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class AnnotationSet:
    """
    Parsed modifiers of one record.

    Attributes:
        power_stats: Stats averaged from the subject (skills/items)
        resist_stats: Stats averaged from the target (skills/items)
        hit_mod: Hit rate offset in percent points (skills/items)
        crit_mod: Critical rate offset in percent points (skills/items)
        crit_boost: Critical damage offset in percent points
    """
    power_stats: tuple[StatId, ...] = ()
    resist_stats: tuple[StatId, ...] = ()
    hit_mod: float = 0.0
    crit_mod: float = 0.0
    crit_boost: float = 0.0

    def value(self, modifier: str) -> Any:
        """Look up a modifier by attribute or tag name ('critBoost')."""
        return getattr(self, MODIFIER_NAMES.get(modifier, modifier))


EMPTY_ANNOTATIONS = AnnotationSet()

MODIFIER_NAMES: Mapping[str, str] = MappingProxyType({
    "powerStats": "power_stats",
    "resistStats": "resist_stats",
    "hitMod": "hit_mod",
    "critMod": "crit_mod",
    "critBoost": "crit_boost",
})

_FIELD_NAMES = frozenset(f.name for f in fields(AnnotationSet))


def parse_number_tag(
    note: str,
    pattern: re.Pattern[str],
    fallback: float = 0.0,
) -> AnnotationResult[float]:
    """Parse a numeric tag. '+5', '5' and '5%' all read as 5."""
    match = pattern.search(note)
    if not match:
        return AnnotationResult.ok(fallback)
    text = match.group(1).rstrip('%')
    if text.startswith('+'):
        text = text[1:]
    return AnnotationResult.ok(float(text))


def parse_stat_list_tag(
    note: str,
    pattern: re.Pattern[str],
    fallback: tuple[StatId, ...] = (),
) -> AnnotationResult[tuple[StatId, ...]]:
    """Parse a one- or two-stat list tag."""
    match = pattern.search(note)
    if not match:
        return AnnotationResult.ok(fallback)
    stats = []
    for name in match.groups():
        if not name:
            continue
        try:
            stats.append(resolve_stat(name))
        except ConfigurationError as e:
            return AnnotationResult.err(e)
    return AnnotationResult.ok(tuple(stats))


def parse_record(record: Any) -> AnnotationResult[AnnotationSet]:
    """
    Parse every tag that applies to a record's kind.

    Records without a name or a note get the default set.
    """
    note = getattr(record, "note", "") or ""
    if not getattr(record, "name", "") or not note:
        return AnnotationResult.ok(EMPTY_ANNOTATIONS)

    crit_boost = parse_number_tag(note, CRIT_BOOST_PATTERN).unwrap()
    kind = getattr(record, "kind", None)
    if kind is None or not RecordKind(kind).is_usable:
        return AnnotationResult.ok(AnnotationSet(crit_boost=crit_boost))

    power_stats = parse_stat_list_tag(note, POWER_STATS_PATTERN)
    if not power_stats.is_ok:
        return AnnotationResult.err(power_stats.error)  # type: ignore[arg-type]
    resist_stats = parse_stat_list_tag(note, RESIST_STATS_PATTERN)
    if not resist_stats.is_ok:
        return AnnotationResult.err(resist_stats.error)  # type: ignore[arg-type]

    return AnnotationResult.ok(AnnotationSet(
        power_stats=power_stats.unwrap(),
        resist_stats=resist_stats.unwrap(),
        hit_mod=parse_number_tag(note, HIT_MOD_PATTERN).unwrap(),
        crit_mod=parse_number_tag(note, CRIT_MOD_PATTERN).unwrap(),
        crit_boost=crit_boost,
    ))


def record_key(record: Any) -> Hashable:
    """Key a record by (kind, id) when it has one, else by identity."""
    key = getattr(record, "key", None)
    if key is not None:
        return key
    return (type(record).__name__, id(record))


class AnnotationTable:
    """
    Side table of parsed annotations, keyed by record.

    Built once when game data loads. A rebuild swaps the whole table in a
    single assignment, so readers see either the old or the new contents.
    """

    def __init__(self, entries: Optional[Mapping[Hashable, AnnotationSet]] = None):
        self._entries: Mapping[Hashable, AnnotationSet] = MappingProxyType(dict(entries or {}))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, record: Any) -> bool:
        return record_key(record) in self._entries

    def get(self, record: Any) -> AnnotationSet:
        """Annotations of a record; the default set if it has none."""
        if record is None:
            return EMPTY_ANNOTATIONS
        return self._entries.get(record_key(record), EMPTY_ANNOTATIONS)

    @staticmethod
    def check_modifier(modifier: str) -> str:
        """
        Attribute name of a modifier given by attribute or tag name.

        Raises:
            KeyError: modifier is not a known annotation
        """
        name = MODIFIER_NAMES.get(modifier, modifier)
        if name not in _FIELD_NAMES:
            raise KeyError(f"Unknown modifier: {modifier}")
        return name

    def value(self, record: Any, modifier: str) -> Any:
        """One modifier of a record, by attribute or tag name."""
        return getattr(self.get(record), self.check_modifier(modifier))

    def rebuild(self, record_sets: Iterable[Iterable[Any]]) -> None:
        """Re-parse all records and replace the table contents at once."""
        self._entries = load_annotations(record_sets)._entries


def load_annotations(record_sets: Iterable[Iterable[Any]]) -> AnnotationTable:
    """
    Parse annotations of every record in every record set.

    Args:
        record_sets: e.g. [skills, items, actors, classes, weapons, ...];
            None entries (unused database slots) are skipped

    Raises:
        UnrecognizedStatError: A stat list names an unknown stat
    """
    entries: dict[Hashable, AnnotationSet] = {}
    for records in record_sets:
        for record in records:
            if record is None:
                continue
            entries[record_key(record)] = parse_record(record).unwrap()

    logger.info(f"Parsed annotations for {len(entries)} records.")
    return AnnotationTable(entries)
