"""
test_groups.py — Agent groups, group shares and marginal propensities.
"""

import numpy as np
import pytest

from distribution_engine.analysis.groups import (
    average_marginal_propensity,
    borrowing_constrained,
    group_percentage,
    identify_group,
    marginal_propensities,
)
from distribution_engine.core.errors import DivisionByZero, ShapeMismatch
from distribution_engine.core.statistic import StatKind


def test_identify_group_by_code_and_predicate():
    z = np.array([0, 1, 2, 1])
    assert identify_group(z, 1).tolist() == [False, True, False, True]
    assert identify_group(z, lambda v: v >= 1).tolist() == [False, True, True, True]


def test_borrowing_constrained():
    assert borrowing_constrained([0.0, 0.5, -1.0], 0.0).tolist() == [True, False, True]


def test_group_percentage():
    stat = group_percentage([True, False, True], [1.0, 2.0, 1.0], "a",
                            description="% borrowing constrained")
    assert stat.kind is StatKind.PERCENTAGE
    assert stat.value == pytest.approx(0.5)
    assert stat.formatted() == "50.00%"


def test_group_percentage_errors():
    with pytest.raises(ShapeMismatch):
        group_percentage([True], [1.0, 1.0], "a")
    with pytest.raises(DivisionByZero):
        group_percentage([True, False], [0.0, 0.0], "a")


def test_marginal_propensities_per_state():
    c = np.array([1.0, 4.0, 2.0, 1.0, 3.0])
    a = np.array([0.0, 2.0, 1.0, 0.0, 2.0])
    z = np.array([0, 0, 0, 1, 1])
    mpc = marginal_propensities(c, a, z)
    np.testing.assert_allclose(mpc[[0, 2, 3]], [1.0, 2.0, 1.0])
    assert np.isnan(mpc[1])
    assert np.isnan(mpc[4])


def test_average_marginal_propensity_ignores_undefined():
    stat = average_marginal_propensity([0.2, np.nan, 0.6], [1.0, 5.0, 1.0])
    assert stat.value == pytest.approx(0.4)
    assert stat.key == "c"
    with pytest.raises(DivisionByZero):
        average_marginal_propensity([np.nan], [1.0])
