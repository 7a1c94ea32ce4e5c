"""
Sandboxed formula evaluation.

User-authored formulas are plain arithmetic expressions over a fixed set
of bound variables. They are parsed once with ``ast``, checked against a
whitelist of node types, cached, and then evaluated by walking the tree.
Nothing is ever handed to ``eval``.

Usage:
    evaluator = FormulaEvaluator()
    bindings = FormulaBindings(action=action, subject=alice, target=bob)
    rate = evaluator.evaluate("subject.hit + action.hitMod / 100", bindings)

Available variables:
    action, subject, target  - bound objects
    a, b                     - aliases for subject and target
    v                        - the game variable store, v[15]
    Math                     - math helpers (Math.pow, Math.sqrt, ...)

Stages may bind extra numeric names (itemDamage, powerStat, damage, ...).
"""

from __future__ import annotations

import ast
import math
import operator
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType, SimpleNamespace
from typing import Any, Callable, Mapping, Optional

from battle_mechanics.core.errors import (
    FormulaEvaluationError,
    FormulaSyntaxError,
    MissingFormulaError,
    NonNumericResultError,
)

DEFAULT_MAX_NODES = 256

# `def` is reserved in Python, but it is the stat everybody writes.
_DEF_ACCESS = re.compile(r"\.def\b")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _power(base: float, exponent: float) -> float:
    result = float(base) ** float(exponent)
    if isinstance(result, complex):
        return math.nan
    return result


_MATH_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "abs": abs,
    "min": min,
    "max": max,
    "pow": _power,
    "sqrt": math.sqrt,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": _round_half_up,
    "exp": math.exp,
    "log": math.log,
    "trunc": math.trunc,
}

Math = SimpleNamespace(**_MATH_FUNCTIONS, PI=math.pi, E=math.e)

_SAFE_CALLABLE_IDS = frozenset(id(fn) for fn in _MATH_FUNCTIONS.values())

_BUILTIN_NAMES: Mapping[str, Any] = MappingProxyType({**_MATH_FUNCTIONS, "Math": Math})

_BINARY_OPERATORS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: _power,
}

_UNARY_OPERATORS: dict[type, Callable[[Any], Any]] = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
    ast.Not: operator.not_,
}

_COMPARE_OPERATORS: dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}

_ALLOWED_EXPRESSIONS = (
    ast.Expression,
    ast.Constant,
    ast.Name,
    ast.Attribute,
    ast.Subscript,
    ast.Call,
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
)

_ALLOWED_MARKERS = (
    ast.Load,
    ast.And,
    ast.Or,
    *_BINARY_OPERATORS,
    *_UNARY_OPERATORS,
    *_COMPARE_OPERATORS,
)


@dataclass(frozen=True)
class FormulaBindings:
    """
    Immutable variable set for one formula evaluation.

    Attributes:
        action: The action being evaluated
        subject: The battler performing the action (also bound as `a`)
        target: The battler affected by the action (also bound as `b`)
        variables: Game variable store (bound as `v`)
        extras: Stage-specific numeric names (itemDamage, damage, ...)
    """
    action: Any
    subject: Any
    target: Any = None
    variables: Any = field(default_factory=dict)
    extras: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    def with_extras(self, **extras: float) -> FormulaBindings:
        """Copy these bindings with additional stage variables."""
        merged = {**self.extras, **extras}
        return FormulaBindings(
            action=self.action,
            subject=self.subject,
            target=self.target,
            variables=self.variables,
            extras=merged,
        )

    def namespace(self) -> dict[str, Any]:
        """Build the name lookup table seen by the formula."""
        names = dict(_BUILTIN_NAMES)
        names.update(
            action=self.action,
            subject=self.subject,
            target=self.target,
            a=self.subject,
            b=self.target,
            v=self.variables,
        )
        names.update(self.extras)
        return names


class CompiledFormula:
    """A validated formula tree, ready to evaluate many times."""

    def __init__(self, source: str, tree: ast.Expression):
        self.source = source
        self._tree = tree

    def __repr__(self) -> str:
        return f"CompiledFormula({self.source!r})"

    def evaluate(self, names: Mapping[str, Any]) -> float:
        """
        Evaluate against a namespace.

        Raises:
            FormulaEvaluationError: The formula raised while evaluating
            NonNumericResultError: The result is NaN or not a number
        """
        try:
            value = self._visit(self._tree.body, names)
            if isinstance(value, bool):
                return float(value)
            if not isinstance(value, (int, float)):
                raise NonNumericResultError(self.source, value)
            # Integers past the float range overflow here
            value = float(value)
        except FormulaEvaluationError:
            raise
        except (ArithmeticError, ValueError, TypeError, LookupError, AttributeError) as e:
            raise FormulaEvaluationError(self.source, f"{type(e).__name__}: {e}") from e

        if math.isnan(value):
            raise NonNumericResultError(self.source, value)
        return value

    def _visit(self, node: ast.AST, names: Mapping[str, Any]) -> Any:
        if isinstance(node, ast.Constant):
            return node.value

        if isinstance(node, ast.Name):
            if node.id not in names:
                raise FormulaEvaluationError(self.source, f"name {node.id!r} is not defined")
            return names[node.id]

        if isinstance(node, ast.Attribute):
            owner = self._visit(node.value, names)
            if owner is None:
                raise FormulaEvaluationError(
                    self.source, f"can not read {node.attr!r} of nothing"
                )
            return getattr(owner, node.attr)

        if isinstance(node, ast.Subscript):
            container = self._visit(node.value, names)
            index = self._visit(node.slice, names)
            if isinstance(index, float) and index.is_integer():
                index = int(index)
            return container[index]

        if isinstance(node, ast.Call):
            func = self._visit(node.func, names)
            if id(func) not in _SAFE_CALLABLE_IDS:
                raise FormulaEvaluationError(self.source, "only math functions can be called")
            return func(*(self._visit(arg, names) for arg in node.args))

        if isinstance(node, ast.BinOp):
            left = self._visit(node.left, names)
            right = self._visit(node.right, names)
            return _BINARY_OPERATORS[type(node.op)](left, right)

        if isinstance(node, ast.UnaryOp):
            return _UNARY_OPERATORS[type(node.op)](self._visit(node.operand, names))

        if isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                result = True
                for value in node.values:
                    result = self._visit(value, names)
                    if not result:
                        return result
                return result
            result = False
            for value in node.values:
                result = self._visit(value, names)
                if result:
                    return result
            return result

        if isinstance(node, ast.Compare):
            left = self._visit(node.left, names)
            for op, comparator in zip(node.ops, node.comparators):
                right = self._visit(comparator, names)
                if not _COMPARE_OPERATORS[type(op)](left, right):
                    return False
                left = right
            return True

        if isinstance(node, ast.IfExp):
            if self._visit(node.test, names):
                return self._visit(node.body, names)
            return self._visit(node.orelse, names)

        raise FormulaEvaluationError(self.source, f"unsupported syntax {type(node).__name__}")


def _validate(source: str, tree: ast.Expression, max_nodes: int) -> None:
    """Reject anything outside the formula grammar."""
    expression_count = 0
    for node in ast.walk(tree):
        if isinstance(node, _ALLOWED_EXPRESSIONS):
            expression_count += 1
        elif not isinstance(node, _ALLOWED_MARKERS):
            raise FormulaSyntaxError(source, f"{type(node).__name__} is not allowed")

        if isinstance(node, ast.Constant) and not isinstance(node.value, (int, float)):
            raise FormulaSyntaxError(source, f"literal {node.value!r} is not a number")
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            raise FormulaSyntaxError(source, f"attribute {node.attr!r} is private")
        if isinstance(node, ast.Name) and node.id.startswith("_"):
            raise FormulaSyntaxError(source, f"name {node.id!r} is private")
        if isinstance(node, ast.Call) and node.keywords:
            raise FormulaSyntaxError(source, "keyword arguments are not allowed")

    if expression_count > max_nodes:
        raise FormulaSyntaxError(
            source, f"formula has {expression_count} terms, limit is {max_nodes}"
        )


@lru_cache(maxsize=512)
def compile_formula(source: str, max_nodes: int = DEFAULT_MAX_NODES) -> CompiledFormula:
    """
    Parse and validate formula text.

    Results are cached, so calling this for every evaluation is cheap.

    Raises:
        MissingFormulaError: The text is empty
        FormulaSyntaxError: The text is not a valid formula
    """
    if not source or not source.strip():
        raise MissingFormulaError()

    text = _DEF_ACCESS.sub(".def_", source.strip())
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as e:
        raise FormulaSyntaxError(source, f"invalid syntax ({e.msg})") from e

    _validate(source, tree, max_nodes)
    return CompiledFormula(source, tree)


class FormulaEvaluator:
    """
    Evaluates formula text against bindings.

    Side-effect free; safe to call many times per turn.
    """

    def __init__(self, max_nodes: int = DEFAULT_MAX_NODES):
        self.max_nodes = max_nodes

    def compile(self, formula: Optional[str], stage: str = "") -> CompiledFormula:
        """Compile formula text, naming the stage if it is missing."""
        if not formula or not formula.strip():
            raise MissingFormulaError(stage)
        return compile_formula(formula, self.max_nodes)

    def evaluate(
        self,
        formula: Optional[str],
        bindings: FormulaBindings,
        stage: str = "",
    ) -> float:
        """
        Evaluate formula text.

        Args:
            formula: Formula text
            bindings: Variables visible to the formula
            stage: Name of the calling stage, used in error messages

        Returns:
            The numeric result (may be infinite; callers apply range policy)

        Raises:
            MissingFormulaError: formula is empty or None
            FormulaEvaluationError: The formula failed or produced NaN
        """
        compiled = self.compile(formula, stage)
        return compiled.evaluate(bindings.namespace())
