"""
Error taxonomy for battle calculations.

Configuration errors are authoring mistakes and always propagate.
Evaluation errors happen during live play; calculation stages recover
from them by logging and substituting zero.
"""

from __future__ import annotations

from typing import Any


class BattleMechanicsError(Exception):
    """Base class for all battle mechanics errors."""


class ConfigurationError(BattleMechanicsError):
    """Content or configuration is malformed. Never recovered."""


class UnrecognizedStatError(ConfigurationError):
    """A stat name did not resolve to a known stat."""

    def __init__(self, stat_name: str):
        self.stat_name = stat_name
        super().__init__(f"Unrecognized stat name: {stat_name}")


class MissingFormulaError(ConfigurationError):
    """A stage was asked to evaluate an empty formula."""

    def __init__(self, stage: str = ""):
        self.stage = stage
        where = f" for {stage}" if stage else ""
        super().__init__(f"No formula is defined{where}!")


class FormulaEvaluationError(BattleMechanicsError):
    """A formula raised while being evaluated."""

    def __init__(self, formula: str, reason: str):
        self.formula = formula
        self.reason = reason
        super().__init__(f"Formula {formula!r} failed: {reason}")


class FormulaSyntaxError(FormulaEvaluationError):
    """Formula text is not valid in the restricted formula grammar."""


class NonNumericResultError(FormulaEvaluationError):
    """Formula evaluated to NaN or to something that is not a number."""

    def __init__(self, formula: str, value: Any):
        self.value = value
        super().__init__(formula, f"non-numeric result {value!r}")


class InvalidDamageValueError(BattleMechanicsError):
    """The damage pipeline produced a value that is not a finite number."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Non-number damage value: {value}")
