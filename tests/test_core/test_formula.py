import math
from types import SimpleNamespace

import pytest

from battle_mechanics.components.variables import GameVariables
from battle_mechanics.core.errors import (
    FormulaEvaluationError,
    FormulaSyntaxError,
    MissingFormulaError,
    NonNumericResultError,
)
from battle_mechanics.core.formula import FormulaBindings, FormulaEvaluator, compile_formula


@pytest.fixture
def evaluator():
    return FormulaEvaluator()


@pytest.fixture
def bindings():
    subject = SimpleNamespace(atk=12, def_=4, luk=30)
    target = SimpleNamespace(atk=5, def_=3, luk=10)
    action = SimpleNamespace(hitMod=5)
    return FormulaBindings(
        action=action,
        subject=subject,
        target=target,
        variables=GameVariables({15: 4}),
    )


def test_arithmetic(evaluator, bindings):
    assert evaluator.evaluate("1 + 2 * 3", bindings) == 7.0
    assert evaluator.evaluate("7 // 2 + 7 % 2", bindings) == 4.0
    assert evaluator.evaluate("2 ** 3", bindings) == 8.0
    assert evaluator.evaluate("-(3 - 5)", bindings) == 2.0


def test_bound_objects_and_aliases(evaluator, bindings):
    assert evaluator.evaluate("subject.atk - target.atk", bindings) == 7.0
    assert evaluator.evaluate("a.atk - b.atk", bindings) == 7.0
    assert evaluator.evaluate("action.hitMod / 100", bindings) == pytest.approx(0.05)


def test_def_is_readable(evaluator, bindings):
    assert evaluator.evaluate("a.atk * 4 - b.def * 2", bindings) == 42.0


def test_game_variables(evaluator, bindings):
    assert evaluator.evaluate("v[15] * 2", bindings) == 8.0
    # Unset variables read as 0
    assert evaluator.evaluate("v[99]", bindings) == 0.0


def test_math_helpers(evaluator, bindings):
    assert evaluator.evaluate("Math.sqrt(16)", bindings) == 4.0
    assert evaluator.evaluate("Math.pow(2, 10)", bindings) == 1024.0
    assert evaluator.evaluate("max(1, 5, 3)", bindings) == 5.0
    assert evaluator.evaluate("Math.floor(2.7) + Math.ceil(2.1)", bindings) == 5.0
    assert evaluator.evaluate("round(2.5)", bindings) == 3.0
    assert evaluator.evaluate("Math.PI", bindings) == pytest.approx(math.pi)


def test_conditionals_and_booleans(evaluator, bindings):
    assert evaluator.evaluate("1 if a.luk > b.luk else 0", bindings) == 1.0
    assert evaluator.evaluate("a.luk > b.luk", bindings) == 1.0
    assert evaluator.evaluate("0 < a.atk < 10", bindings) == 0.0
    assert evaluator.evaluate("0 or 7", bindings) == 7.0


def test_stage_extras(evaluator, bindings):
    extended = bindings.with_extras(itemDamage=10, powerStat=7, resistStat=5)
    assert evaluator.evaluate("itemDamage + powerStat - resistStat", extended) == 12.0
    # The source bindings are untouched
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("itemDamage", bindings)


def test_bindings_are_immutable(bindings):
    with pytest.raises(AttributeError):
        bindings.subject = None
    with pytest.raises(TypeError):
        bindings.extras["damage"] = 1


def test_missing_formula(evaluator, bindings):
    with pytest.raises(MissingFormulaError) as exc_info:
        evaluator.evaluate("", bindings, stage="luck")
    assert "luck" in str(exc_info.value)

    with pytest.raises(MissingFormulaError):
        evaluator.evaluate(None, bindings)
    with pytest.raises(MissingFormulaError):
        evaluator.evaluate("   ", bindings)


def test_missing_formula_is_not_an_evaluation_error(evaluator, bindings):
    with pytest.raises(MissingFormulaError) as exc_info:
        evaluator.evaluate("", bindings)
    assert not isinstance(exc_info.value, FormulaEvaluationError)


@pytest.mark.parametrize("formula", [
    "__import__('os')",
    "subject.__class__",
    "lambda: 1",
    "[1, 2]",
    "'text'",
    "max(1, key=abs)",
    "a.atk +",
])
def test_rejected_syntax(evaluator, bindings, formula):
    with pytest.raises(FormulaSyntaxError):
        evaluator.evaluate(formula, bindings)


def test_only_math_functions_can_be_called(evaluator):
    subject = SimpleNamespace(heal=lambda: 100)
    bindings = FormulaBindings(action=None, subject=subject)
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("subject.heal()", bindings)


def test_runtime_faults(evaluator, bindings):
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("1 / 0", bindings)
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("subject.missing", bindings)
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("Math.sqrt(-1)", bindings)
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("unknown + 1", bindings)


def test_missing_target(evaluator):
    bindings = FormulaBindings(action=None, subject=SimpleNamespace(atk=1))
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("target.eva", bindings)


def test_nan_result(evaluator, bindings):
    with pytest.raises(NonNumericResultError):
        evaluator.evaluate("Math.pow(-8, 0.5)", bindings)


def test_infinite_result_is_returned(evaluator, bindings):
    assert evaluator.evaluate("1e308 * 10", bindings) == math.inf


def test_oversized_integer_result(evaluator, bindings):
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("1" + "0" * 400, bindings)
    with pytest.raises(FormulaEvaluationError):
        evaluator.evaluate("9" * 400 + " // 1", bindings)


def test_non_numeric_result(evaluator):
    bindings = FormulaBindings(action=None, subject=SimpleNamespace(name="Alice"))
    with pytest.raises(NonNumericResultError):
        evaluator.evaluate("subject.name", bindings)


def test_node_budget(bindings):
    long_formula = " + ".join(["1"] * 300)
    with pytest.raises(FormulaSyntaxError):
        FormulaEvaluator(max_nodes=256).evaluate(long_formula, bindings)
    assert FormulaEvaluator(max_nodes=1000).evaluate(long_formula, bindings) == 300.0


def test_compiled_formulas_are_cached():
    assert compile_formula("1 + 1") is compile_formula("1 + 1")
