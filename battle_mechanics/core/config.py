"""
Battle configuration.

Built once at startup and passed explicitly to every stage. The model is
frozen, so it can be shared freely between calls.

Every field can also be given by the display name used in the
plugin parameter list ("Minimum Damage", "Critical Damage Formula", ...),
so exported plugin settings load unchanged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator

from battle_mechanics.core.component import FrozenComponent
from battle_mechanics.core.diagnostics import RECOGNIZED_CATEGORIES
from battle_mechanics.core.errors import ConfigurationError, FormulaEvaluationError
from battle_mechanics.core.formula import DEFAULT_MAX_NODES, compile_formula

logger = logging.getLogger(__name__)

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "oneOf": [
            {"type": "number"},
            {"type": "string"},
            {"type": "array", "items": {"type": "string"}},
        ]
    },
}

FORMULA_FIELDS = (
    "standard_damage_function",
    "high_resist_damage_function",
    "physical_hit_formula",
    "magical_hit_formula",
    "physical_evasion_formula",
    "magical_evasion_formula",
    "critical_rate_formula",
    "critical_damage_formula",
    "luck_effect_formula",
)


def _alias(name: str, display_name: str) -> AliasChoices:
    return AliasChoices(name, display_name)


class BattleConfig(FrozenComponent):
    """
    Load-once battle configuration.

    Attributes:
        min_damage: Smallest damage/healing magnitude per hit
        max_damage: Largest damage/healing magnitude per hit
        standard_damage_function: Used when powerStat >= resistStat
        high_resist_damage_function: Used when resistStat > powerStat
        physical_hit_formula: Raw hit rate for physical actions
        magical_hit_formula: Raw hit rate for magical actions
        min_hit_rate: Hit rate for a raw formula result of 0
        max_hit_rate: Hit rate for a raw formula result of 1
        physical_evasion_formula: Evasion rate against physical actions
        magical_evasion_formula: Evasion rate against magical actions
        critical_rate_formula: Critical hit probability
        critical_damage_formula: Damage after a critical hit
        luck_effect_formula: Multiplier on state/debuff success
        log_categories: Enabled diagnostic categories
        max_formula_nodes: Size limit for any single formula
    """
    min_damage: float = Field(0, validation_alias=_alias("min_damage", "Minimum Damage"))
    max_damage: float = Field(9999, validation_alias=_alias("max_damage", "Maximum Damage"))
    standard_damage_function: str = Field(
        "itemDamage + powerStat - resistStat",
        validation_alias=_alias("standard_damage_function", "Standard Damage Function"),
    )
    high_resist_damage_function: str = Field(
        "itemDamage - Math.pow(resistStat - powerStat, 0.5)",
        validation_alias=_alias("high_resist_damage_function", "High Resist Damage Function"),
    )
    physical_hit_formula: str = Field(
        "subject.hit + action.hitMod / 100",
        validation_alias=_alias("physical_hit_formula", "Physical Hit Rate Formula"),
    )
    magical_hit_formula: str = Field(
        "1",
        validation_alias=_alias("magical_hit_formula", "Magical Hit Rate Formula"),
    )
    min_hit_rate: float = Field(0.2, validation_alias=_alias("min_hit_rate", "Minimum Hit Rate"))
    max_hit_rate: float = Field(1.2, validation_alias=_alias("max_hit_rate", "Maximum Hit Rate"))
    physical_evasion_formula: str = Field(
        "target.eva",
        validation_alias=_alias("physical_evasion_formula", "Physical Evasion Formula"),
    )
    magical_evasion_formula: str = Field(
        "target.mev",
        validation_alias=_alias("magical_evasion_formula", "Magical Evasion Formula"),
    )
    critical_rate_formula: str = Field(
        "(subject.cri + action.critMod / 100) * (1 - target.cev)",
        validation_alias=_alias("critical_rate_formula", "Critical Hit Rate Formula"),
    )
    critical_damage_formula: str = Field(
        "damage * (3 + (subject.critBoost + action.critBoost) / 100)",
        validation_alias=_alias("critical_damage_formula", "Critical Damage Formula"),
    )
    luck_effect_formula: str = Field(
        "1.0 + (subject.luk - target.luk) * 0.001",
        validation_alias=_alias("luck_effect_formula", "Luck Effect Rate Formula"),
    )
    log_categories: frozenset[str] = Field(
        frozenset(),
        validation_alias=_alias("log_categories", "Console Log Categories"),
    )
    max_formula_nodes: int = Field(DEFAULT_MAX_NODES, gt=0)

    @field_validator("log_categories", mode="before")
    @classmethod
    def _parse_categories(cls, value: Any) -> Any:
        # The plugin editor stores lists as JSON text.
        if isinstance(value, str):
            value = json.loads(value) if value.strip() else []
        if value is None:
            return frozenset()
        categories = frozenset(str(c).strip().lower() for c in value)
        unknown = categories - RECOGNIZED_CATEGORIES
        if unknown:
            raise ValueError(f"Unknown log categories: {', '.join(sorted(unknown))}")
        return categories

    @model_validator(mode="after")
    def _check_ranges_and_formulas(self) -> BattleConfig:
        if self.min_damage < 0:
            raise ValueError("min_damage can not be negative")
        if self.max_damage < self.min_damage:
            raise ValueError("max_damage must be at least min_damage")
        if self.max_hit_rate < self.min_hit_rate:
            raise ValueError("max_hit_rate must be at least min_hit_rate")

        for name in FORMULA_FIELDS:
            text = getattr(self, name)
            if not text or not text.strip():
                # Reported as MissingFormulaError by the stage that needs it.
                continue
            try:
                compile_formula(text, self.max_formula_nodes)
            except FormulaEvaluationError as e:
                raise ValueError(f"{name}: {e}") from e
        return self

    @property
    def hit_rate_variance(self) -> float:
        """Width of the hit rate window."""
        return self.max_hit_rate - self.min_hit_rate


def load_config(path: Path | str) -> BattleConfig:
    """
    Load configuration from a JSON file.

    A missing file gives the defaults.

    Raises:
        ConfigurationError: The file is not valid configuration
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return BattleConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        config = BattleConfig.model_validate(data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
    except jsonschema.ValidationError as e:
        raise ConfigurationError(f"Config file {path} is malformed: {e.message}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Config file {path} is invalid: {e}") from e

    logger.info(f"Loaded battle config from {path}")
    return config
