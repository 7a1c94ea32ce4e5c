"""
Calculation stage base class.

Stages contain all battle calculation logic. Each one is handed the
same StageContext: configuration, formula evaluator, annotation table,
modifier aggregator, game variables and the diagnostic tracer.

Usage:
    class LuckEffectResolver(CalculationStage):
        category = "luck"

        def luck_effect_multiplier(self, action, target) -> float:
            rate = self.evaluate(self.config.luck_effect_formula, action, target)
            return max(rate, 0.0)
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from battle_mechanics.battle.action import ActionView, BattlerView
from battle_mechanics.battle.aggregator import ModifierAggregator
from battle_mechanics.components.variables import GameVariables
from battle_mechanics.core.config import BattleConfig
from battle_mechanics.core.diagnostics import DiagnosticLogger
from battle_mechanics.core.errors import BattleMechanicsError
from battle_mechanics.core.formula import FormulaBindings, FormulaEvaluator
from battle_mechanics.resources.annotations import AnnotationTable


@dataclass
class StageContext:
    """Collaborators shared by every stage of one calculator."""
    config: BattleConfig
    annotations: AnnotationTable = field(default_factory=AnnotationTable)
    variables: Any = field(default_factory=GameVariables)
    trace: Optional[DiagnosticLogger] = None
    evaluator: Optional[FormulaEvaluator] = None
    aggregator: Optional[ModifierAggregator] = None

    def __post_init__(self) -> None:
        if self.trace is None:
            self.trace = DiagnosticLogger(self.config.log_categories)
        if self.evaluator is None:
            self.evaluator = FormulaEvaluator(self.config.max_formula_nodes)
        if self.aggregator is None:
            self.aggregator = ModifierAggregator(self.annotations, self.trace)


class CalculationStage(ABC):
    """
    Base class for all calculation stages.

    Override `category` with the diagnostic category of the stage.
    """

    # Diagnostic category used for traces and error reports
    category: ClassVar[str] = ""

    def __init__(self, context: StageContext):
        self.context = context

    @property
    def config(self) -> BattleConfig:
        return self.context.config

    @property
    def trace(self) -> DiagnosticLogger:
        return self.context.trace  # type: ignore[return-value]

    @property
    def annotations(self) -> AnnotationTable:
        return self.context.annotations

    def bindings(self, action: Any, target: Any = None, **extras: float) -> FormulaBindings:
        """Build the formula variables for one evaluation."""
        return FormulaBindings(
            action=ActionView(action, self.context.annotations, self.trace, self.context.aggregator),
            subject=BattlerView(action.subject, self.context.aggregator),
            target=BattlerView(target, self.context.aggregator) if target is not None else None,
            variables=self.context.variables,
            extras=extras,
        )

    def evaluate(self, formula: Optional[str], action: Any, target: Any = None, **extras: float) -> float:
        """Evaluate a formula for an action against a target."""
        return self.context.evaluator.evaluate(  # type: ignore[union-attr]
            formula,
            self.bindings(action, target, **extras),
            stage=self.category,
        )

    def recover(self, error: BattleMechanicsError, substitute: float = 0.0) -> float:
        """Report a recovered evaluation failure and return its substitute."""
        self.trace.error(f"{type(self).__name__} ({self.category})", error)
        self.trace.warning(f"Using {substitute:g} as {self.category} value")
        return substitute
