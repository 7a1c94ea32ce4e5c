"""
Category-filtered tracing of intermediate battle values.

Traces are ordinary ``logging`` records on the ``battle_mechanics.trace``
logger. Each record carries the categories it belongs to, and a
CategoryFilter decides which of them get through. Warnings and errors
always pass.

Usage:
    trace = DiagnosticLogger({"damage", "hit"})
    trace.log("damage", "Base skill damage: 10")
    trace.log("critical damage", "Pre-crit damage: 12")   # shown: 'damage'
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable

TRACE_LOGGER_NAME = "battle_mechanics.trace"

_CATEGORY_SEPARATORS = re.compile(r"[,; ]+")


class LogCategory(str, Enum):
    """Recognized diagnostic categories."""
    NONE = "none"
    ALL = "all"
    DAMAGE = "damage"
    HIT = "hit"
    EVASION = "evasion"
    CRITICAL = "critical"
    LUCK = "luck"


RECOGNIZED_CATEGORIES = frozenset(category.value for category in LogCategory)


def split_categories(category_string: str) -> list[str]:
    """Split 'critical damage' or 'hit, evasion' into single categories."""
    return [c for c in _CATEGORY_SEPARATORS.split(category_string.lower()) if c]


class CategoryFilter(logging.Filter):
    """
    Passes trace records whose categories are enabled.

    Rules:
        - empty set, or 'none' anywhere in it: no traces
        - 'all': every trace
        - otherwise: traces sharing at least one category with the set
    """

    def __init__(self, enabled: Iterable[str] = ()):
        super().__init__()
        self.enabled = frozenset(c.lower() for c in enabled)
        self.silent = not self.enabled or LogCategory.NONE.value in self.enabled
        self.everything = not self.silent and LogCategory.ALL.value in self.enabled

    def allows(self, categories: Iterable[str]) -> bool:
        """Check whether a trace in these categories would be emitted."""
        if self.silent:
            return False
        if self.everything:
            return True
        return any(c in self.enabled for c in categories)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.WARNING:
            return True
        categories = getattr(record, "categories", None)
        if categories is None:
            return True
        return self.allows(categories)


class DiagnosticLogger:
    """
    Side-channel tracer shared by all calculation stages.

    Never affects control flow. Errors recovered by a stage are reported
    through error() and warning(), which ignore the category filter.
    """

    def __init__(self, enabled: Iterable[str] = (), logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(TRACE_LOGGER_NAME)
        self.filter = CategoryFilter(enabled)

    def is_enabled(self, category_string: str) -> bool:
        """Check whether a trace in these categories would be emitted."""
        return self.filter.allows(split_categories(category_string))

    def log(self, category_string: str, message: str) -> None:
        """Trace a message under one or more categories."""
        categories = split_categories(category_string)
        if not self.filter.allows(categories):
            return
        self.logger.info(message, extra={"categories": tuple(categories)})

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self.logger.error(f"{message}: {exc}")
        else:
            self.logger.error(message)
