import logging

import pytest

from battle_mechanics.core.diagnostics import (
    TRACE_LOGGER_NAME,
    CategoryFilter,
    DiagnosticLogger,
    split_categories,
)


@pytest.fixture
def capture(caplog):
    caplog.set_level(logging.INFO, logger=TRACE_LOGGER_NAME)
    return caplog


def test_split_categories():
    assert split_categories("critical damage") == ["critical", "damage"]
    assert split_categories("Hit, Evasion") == ["hit", "evasion"]
    assert split_categories("") == []


def test_listed_categories_only(capture):
    trace = DiagnosticLogger({"damage"})
    trace.log("damage", "Base skill damage: 10")
    trace.log("hit", "Hit rate, rough: 0.9")

    assert "Base skill damage: 10" in capture.text
    assert "Hit rate" not in capture.text


def test_multi_category_message(capture):
    trace = DiagnosticLogger({"damage"})
    trace.log("critical damage", "Pre-crit damage: 12")
    assert "Pre-crit damage: 12" in capture.text


def test_all_enables_everything(capture):
    trace = DiagnosticLogger({"all"})
    trace.log("luck", "Luck Effect Rate: 1.01")
    trace.log("evasion", "Evasion Rate: 0.05")
    assert "Luck Effect Rate" in capture.text
    assert "Evasion Rate" in capture.text


def test_none_wins_over_other_categories(capture):
    trace = DiagnosticLogger({"none", "all", "damage"})
    trace.log("damage", "Base skill damage: 10")
    assert capture.records == []
    assert not trace.is_enabled("damage")


def test_empty_set_is_silent(capture):
    trace = DiagnosticLogger()
    trace.log("damage", "Base skill damage: 10")
    assert capture.records == []


def test_errors_ignore_categories(capture):
    trace = DiagnosticLogger({"none"})
    trace.error("DamagePipeline (damage)", ZeroDivisionError("division by zero"))
    trace.warning("Using 0 as damage value")

    levels = [record.levelno for record in capture.records]
    assert levels == [logging.ERROR, logging.WARNING]
    assert "division by zero" in capture.text


def test_records_carry_categories(capture):
    trace = DiagnosticLogger({"hit"})
    trace.log("hit", "Hit formula: 1")
    assert capture.records[0].categories == ("hit",)


def test_category_filter_on_handler():
    handler_filter = CategoryFilter({"luck"})

    luck = logging.LogRecord(TRACE_LOGGER_NAME, logging.INFO, __file__, 1, "luck", None, None)
    luck.categories = ("luck",)
    damage = logging.LogRecord(TRACE_LOGGER_NAME, logging.INFO, __file__, 1, "damage", None, None)
    damage.categories = ("damage",)
    error = logging.LogRecord(TRACE_LOGGER_NAME, logging.ERROR, __file__, 1, "boom", None, None)
    error.categories = ("damage",)
    plain = logging.LogRecord(TRACE_LOGGER_NAME, logging.INFO, __file__, 1, "plain", None, None)

    assert handler_filter.filter(luck)
    assert not handler_filter.filter(damage)
    assert handler_filter.filter(error)
    assert handler_filter.filter(plain)


def test_custom_logger(caplog):
    logger = logging.getLogger("tests.battle")
    caplog.set_level(logging.INFO, logger="tests.battle")

    DiagnosticLogger({"all"}, logger=logger).log("damage", "routed")
    assert caplog.records[0].name == "tests.battle"
