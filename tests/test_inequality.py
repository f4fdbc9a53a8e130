"""
test_inequality.py — Weighted Gini coefficient.
"""

import numpy as np
import pytest

from distribution_engine.analysis.inequality import gini
from distribution_engine.core.errors import DivisionByZero, ShapeMismatch
from distribution_engine.core.statistic import StatKind


def test_equal_values_give_zero():
    stat = gini([3.0, 3.0, 3.0, 3.0], [1.0, 2.0, 3.0, 4.0], "a")
    assert stat.kind is StatKind.SHARE
    assert stat.value == pytest.approx(0.0, abs=1e-12)


def test_two_agents_one_holds_everything():
    assert gini([0.0, 1.0], [1.0, 1.0], "a").value == pytest.approx(0.5)


def test_invariant_to_weight_scale_and_order():
    rng = np.random.default_rng(3)
    values = rng.lognormal(size=100)
    weights = rng.uniform(size=100)
    base = gini(values, weights, "a").value
    assert gini(values, 50.0 * weights, "a").value == pytest.approx(base)
    perm = rng.permutation(100)
    assert gini(values[perm], weights[perm], "a").value == pytest.approx(base)
    assert 0.0 < base < 1.0


def test_concentration_raises_gini():
    n = 1000
    values = np.zeros(n)
    values[-1] = 1.0
    assert gini(values, np.ones(n), "a").value == pytest.approx(1.0 - 1.0 / n)


def test_errors():
    with pytest.raises(ShapeMismatch):
        gini([1.0, 2.0], [1.0], "a")
    with pytest.raises(DivisionByZero):
        gini([1.0, 2.0], [0.0, 0.0], "a")
    with pytest.raises(DivisionByZero):
        gini([0.0, 0.0], [1.0, 1.0], "a")
