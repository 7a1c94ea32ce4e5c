"""
Core - formula evaluation, configuration, diagnostics and errors.
"""

from battle_mechanics.core.component import Component, FrozenComponent
from battle_mechanics.core.errors import (
    BattleMechanicsError,
    ConfigurationError,
    UnrecognizedStatError,
    MissingFormulaError,
    FormulaEvaluationError,
    FormulaSyntaxError,
    NonNumericResultError,
    InvalidDamageValueError,
)
from battle_mechanics.core.formula import (
    FormulaBindings,
    FormulaEvaluator,
    CompiledFormula,
    compile_formula,
    Math,
)
from battle_mechanics.core.diagnostics import (
    DiagnosticLogger,
    CategoryFilter,
    LogCategory,
)
from battle_mechanics.core.config import BattleConfig, load_config

__all__ = [
    # Component
    "Component",
    "FrozenComponent",
    # Errors
    "BattleMechanicsError",
    "ConfigurationError",
    "UnrecognizedStatError",
    "MissingFormulaError",
    "FormulaEvaluationError",
    "FormulaSyntaxError",
    "NonNumericResultError",
    "InvalidDamageValueError",
    # Formula
    "FormulaBindings",
    "FormulaEvaluator",
    "CompiledFormula",
    "compile_formula",
    "Math",
    # Diagnostics
    "DiagnosticLogger",
    "CategoryFilter",
    "LogCategory",
    # Config
    "BattleConfig",
    "load_config",
]
