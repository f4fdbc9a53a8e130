"""
test_mobility.py — Propagation through transition matrices and future buckets.
"""

import numpy as np
import pytest
from scipy import sparse

from distribution_engine.core.errors import DivisionByZero, HorizonOutOfRange, ShapeMismatch
from distribution_engine.core.quantiles import build_bucket_matrix
from distribution_engine.core.statistic import FutureDistr, StatKind
from distribution_engine.simulation.mobility import (
    future_distribution,
    future_probabilities,
    propagate,
    quantile_transition_matrix,
)

SWAP = sparse.csr_matrix(np.array([
    [0.0, 1.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 0.0, 1.0],
]))


def test_double_swap_returns_to_start():
    """Two swaps of states 0 and 1 bring the mass back to state 0."""
    np.testing.assert_allclose(propagate([1.0, 0.0, 0.0], [SWAP, SWAP]), [1.0, 0.0, 0.0])
    np.testing.assert_allclose(propagate([1.0, 0.0, 0.0], [SWAP, SWAP], nt=1), [0.0, 1.0, 0.0])


def test_zero_horizon_is_identity():
    d = np.array([0.2, 0.3, 0.5])
    out = propagate(d, [SWAP], nt=0)
    np.testing.assert_allclose(out, d)
    assert out is not d


def test_matrices_apply_in_order():
    """Rectangular matrices only compose in the supplied order."""
    q1 = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])      # 2 → 3 states
    q2 = np.array([[1.0, 0.0, 1.0], [0.0, 1.0, 0.0]])        # 3 → 2 states
    np.testing.assert_allclose(propagate([0.4, 0.6], [q1, q2]), [0.4, 0.6])
    with pytest.raises(ShapeMismatch):
        propagate([0.4, 0.6], [q2, q1])


def test_mass_is_preserved_by_stochastic_matrices():
    rng = np.random.default_rng(11)
    q = rng.uniform(size=(6, 6))
    q /= q.sum(axis=0)
    d = rng.uniform(size=6)
    assert propagate(d, [q, q, q]).sum() == pytest.approx(d.sum())


def test_horizon_out_of_range():
    with pytest.raises(HorizonOutOfRange):
        propagate([1.0, 0.0, 0.0], [SWAP], nt=2)
    with pytest.raises(HorizonOutOfRange):
        propagate([1.0, 0.0, 0.0], [SWAP], nt=-1)


def test_future_distribution_over_states():
    stat = future_distribution([1.0, 0.0, 1.0], [SWAP], 1, sparse.identity(3), "a")
    assert isinstance(stat, FutureDistr)
    assert stat.kind is StatKind.SHARE
    assert stat.horizon == 1
    assert stat.subgroup_label == "anywhere"
    np.testing.assert_allclose(stat.values, [0.0, 1.0, 1.0])
    assert len(stat.labels) == 3


def test_future_probabilities_divide_by_subgroup_size():
    future_bm = build_bucket_matrix([1.0, 2.0, 3.0], np.ones(3), 3)
    stat = future_probabilities(
        [1.0, 1.0, 0.0], [SWAP], 1, future_bm, "a",
        subgroup_label="bottom two", future_weights=np.ones(3),
    )
    assert stat.kind is StatKind.PROBABILITY
    np.testing.assert_allclose(stat.values, [0.5, 0.5, 0.0])
    assert stat.values.sum() == pytest.approx(1.0)
    assert stat.labels == ("P_0-33", "P_33-67", "P_67-100")
    assert stat.to_dict()["subgroup_label"] == "bottom two"


def test_empty_subgroup_has_no_probabilities():
    with pytest.raises(DivisionByZero):
        future_probabilities([0.0, 0.0, 0.0], [SWAP], 1, sparse.identity(3), "a")


def test_future_bucket_matrix_must_match_states():
    with pytest.raises(ShapeMismatch):
        future_distribution([1.0, 0.0, 0.0], [SWAP], 1, sparse.identity(4), "a")


def test_quantile_transition_matrix():
    values = np.array([1.0, 2.0, 3.0])
    bm = build_bucket_matrix(values, np.ones(3), 3)
    np.testing.assert_allclose(
        quantile_transition_matrix(bm, [sparse.identity(3)], np.ones(3)), np.eye(3)
    )
    moved = quantile_transition_matrix(bm, [SWAP], np.ones(3))
    np.testing.assert_allclose(moved, SWAP.toarray())
    np.testing.assert_allclose(moved.sum(axis=0), 1.0)
