"""
Modifier aggregation over a battler's trait sources.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from battle_mechanics.core.diagnostics import DiagnosticLogger
from battle_mechanics.resources.annotations import AnnotationTable


class TraitBearer(Protocol):
    """Anything that can list the records contributing its traits."""

    def trait_objects(self) -> Iterable[Any]: ...


class ModifierAggregator:
    """
    Sums one annotation modifier across everything a battler carries.

    Sources come from the battler's trait_objects(): its own record,
    class, equipment and applied states. A source without annotations
    contributes 0.
    """

    def __init__(self, annotations: AnnotationTable, trace: DiagnosticLogger):
        self.annotations = annotations
        self.trace = trace

    def aggregate(
        self,
        battler: TraitBearer,
        modifier: str,
        category: str = "critical damage",
    ) -> float:
        """
        Total a numeric modifier ('critBoost', 'hit_mod', ...) for a battler.

        Args:
            battler: Battler whose trait sources are summed
            modifier: Annotation name
            category: Diagnostic category for the trace

        Raises:
            KeyError: modifier is not a known annotation
        """
        self.annotations.check_modifier(modifier)
        total = 0.0
        for source in battler.trait_objects():
            value = self.annotations.value(source, modifier)
            self.trace.log(
                category,
                f"\t\t{modifier} from {getattr(source, 'name', source)}: {value}",
            )
            total += value
        self.trace.log(category, f"\tSubject's total {modifier}: {total}")
        return total
