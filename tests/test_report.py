"""
test_report.py — StatisticLog and statistic records.
"""

import numpy as np
import pytest

from distribution_engine.analysis.report import StatisticLog
from distribution_engine.core.statistic import (
    FutureDistr,
    StatDistr,
    StatKind,
    Statistic,
    format_value,
    variable_name,
)


def _scalar(key="a", value=0.3):
    return Statistic(StatKind.SHARE, value, key, "Gini coefficient")


def test_statistic_round_trip():
    stat = _scalar()
    assert Statistic.from_dict(stat.to_dict()) == stat


def test_percentage_must_be_fraction():
    with pytest.raises(ValueError):
        Statistic(StatKind.PERCENTAGE, 1.5, "a", "bad")


def test_stat_distr_labels_line_up():
    with pytest.raises(ValueError):
        StatDistr(StatKind.SHARE, [0.5, 0.5], ["only one"], "a", "bad")
    distr = StatDistr(StatKind.SHARE, [0.25, np.nan], ["P_0-50", "P_50-100"], "a", "d")
    assert len(distr) == 2
    assert distr.formatted() == {"P_0-50": "25.00%", "P_50-100": "n/a"}
    assert distr.to_dict()["values"] == [0.25, None]


def test_future_distr_rejects_negative_horizon():
    with pytest.raises(ValueError):
        FutureDistr(StatKind.SHARE, [1.0], ["all"], "a", "d", horizon=-1)


def test_formatting_and_variable_names():
    assert format_value(StatKind.MEAN, 1234.5678) == "1235"
    assert format_value(StatKind.PROBABILITY, 0.125) == "12.50%"
    assert variable_name("a") == "assets"
    assert variable_name("k") == "k"


def test_log_records_in_order():
    log = StatisticLog()
    log.record(_scalar("a"))
    log.extend([_scalar("c"), _scalar("a", 0.4)])
    assert len(log) == 3
    assert [s.key for s in log.records()] == ["a", "c", "a"]
    assert len(log.by_key("a")) == 2
    assert log.to_dicts()[1]["key"] == "c"
    log.clear()
    assert len(log) == 0


def test_log_is_bounded_fifo():
    log = StatisticLog(max_records=2)
    for value in (0.1, 0.2, 0.3):
        log.record(_scalar(value=value))
    assert [s.value for s in log.records()] == [0.2, 0.3]
    with pytest.raises(ValueError):
        StatisticLog(max_records=0)
