"""
Resources - stat names, record annotations and the game database.
"""

from battle_mechanics.resources.stats import (
    StatId,
    STAT_ALIASES,
    resolve_stat,
    stat_list_to_string,
)
from battle_mechanics.resources.annotations import (
    AnnotationResult,
    AnnotationSet,
    AnnotationTable,
    EMPTY_ANNOTATIONS,
    parse_number_tag,
    parse_stat_list_tag,
    parse_record,
    load_annotations,
)
from battle_mechanics.resources.database import GameDatabase

__all__ = [
    # Stats
    "StatId",
    "STAT_ALIASES",
    "resolve_stat",
    "stat_list_to_string",
    # Annotations
    "AnnotationResult",
    "AnnotationSet",
    "AnnotationTable",
    "EMPTY_ANNOTATIONS",
    "parse_number_tag",
    "parse_stat_list_tag",
    "parse_record",
    "load_annotations",
    # Database
    "GameDatabase",
]
