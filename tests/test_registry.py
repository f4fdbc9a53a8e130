"""
test_registry.py — Named statistics and analysis parameters.
"""

import numpy as np
import pytest

from distribution_engine.analysis.registry import (
    compute_statistic,
    compute_statistics,
    discover_statistics,
)
from distribution_engine.core.parameters import AnalysisParameters
from distribution_engine.core.statistic import StatDistr, Statistic

VALUES = np.arange(1.0, 11.0)
WEIGHTS = np.ones(10)


def test_builtin_statistics_registered():
    names = set(discover_statistics())
    assert {"quantile_shares", "quantile_means", "gini", "top_shares", "bottom_shares"} <= names


def test_default_statistics():
    records = compute_statistics(VALUES, WEIGHTS, AnalysisParameters())
    assert [type(r) for r in records] == [StatDistr, StatDistr, Statistic]
    assert len(records[0]) == 5
    assert records[2].description == "Gini coefficient of assets"


def test_top_and_bottom_shares():
    params = AnalysisParameters(top_cuts=(0.9,), bottom_cuts=(0.5,), key="y")
    top = compute_statistic("top_shares", VALUES, WEIGHTS, params)
    assert top.labels == ("Top 10%",)
    assert top.values[0] == pytest.approx(10.0 / 55.0)
    bottom = compute_statistic("bottom_shares", VALUES, WEIGHTS, params)
    assert bottom.labels == ("Bottom 50%",)
    assert bottom.values[0] == pytest.approx(15.0 / 55.0)
    assert bottom.key == "y"


def test_explicit_cut_points_take_precedence():
    params = AnalysisParameters(nq=4, cut_points=(0.5,))
    assert params.cut_spec() == (0.5,)
    shares = compute_statistic("quantile_shares", VALUES, WEIGHTS, params)
    np.testing.assert_allclose(shares.values, [15.0 / 55.0, 40.0 / 55.0])


def test_unknown_statistic():
    with pytest.raises(ValueError, match="Unknown statistic 'median'"):
        compute_statistic("median", VALUES, WEIGHTS, AnalysisParameters())


def test_parameter_validation():
    with pytest.raises(ValueError):
        AnalysisParameters(nq=1)
    with pytest.raises(ValueError):
        AnalysisParameters(top_cuts=(0.99, 0.9))
    with pytest.raises(ValueError):
        AnalysisParameters(statistics=())
    with pytest.raises(ValueError):
        AnalysisParameters(horizon=-1)


def test_parameters_round_trip():
    params = AnalysisParameters(nq=10, top_cuts=[0.9, 0.99], key="c")
    assert params.top_cuts == (0.9, 0.99)
    assert AnalysisParameters.from_dict(params.to_dict()) == params
