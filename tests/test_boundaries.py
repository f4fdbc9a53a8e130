"""
test_boundaries.py — Boundary location on cumulative weight distributions.
"""

import numpy as np
import pytest

from distribution_engine.core.boundaries import (
    cumulative_distribution,
    locate_boundaries,
    validate_cut_points,
)
from distribution_engine.core.errors import DivisionByZero, ShapeMismatch


def test_cumulative_distribution_ends_at_one():
    """Running sum is normalised and its last entry is exactly 1."""
    cum = cumulative_distribution([1.0, 1.0, 2.0])
    np.testing.assert_allclose(cum, [0.25, 0.5, 1.0])
    assert cum[-1] == 1.0


def test_cumulative_distribution_rejects_bad_weights():
    with pytest.raises(ShapeMismatch):
        cumulative_distribution([1.0, -0.5])
    with pytest.raises(DivisionByZero):
        cumulative_distribution([0.0, 0.0])


def test_interior_cut_is_interpolated():
    """A cut inside an agent's interval splits that agent's weight linearly."""
    lower, upper, split = locate_boundaries([0.25, 0.5, 0.75, 1.0], [0.3])
    assert upper.tolist() == [1]
    assert lower.tolist() == [0]
    np.testing.assert_allclose(split, [0.2])


def test_exact_hit_goes_to_lower_side():
    """A cut on an agent's upper edge leaves the agent wholly below the cut."""
    _, upper, split = locate_boundaries([0.25, 0.5, 0.75, 1.0], [0.5])
    assert upper.tolist() == [1]
    np.testing.assert_allclose(split, [1.0])


def test_cut_below_first_agent_extrapolates_from_origin():
    lower, upper, split = locate_boundaries([0.25, 0.5, 0.75, 1.0], [0.1])
    assert upper.tolist() == [0]
    assert lower.tolist() == [0]
    np.testing.assert_allclose(split, [0.4])


def test_linspace_cut_points_resolve_despite_rounding():
    """0.6000000000000001 still lands on the agent whose cum is 0.6."""
    cum = cumulative_distribution(np.ones(5))
    divs = np.linspace(0.0, 1.0, 6)[1:-1]
    _, upper, split = locate_boundaries(cum, divs)
    assert upper.tolist() == [0, 1, 2, 3]
    np.testing.assert_allclose(split, 1.0)


def test_split_is_always_a_fraction():
    rng = np.random.default_rng(0)
    cum = cumulative_distribution(rng.uniform(0.1, 1.0, size=50))
    _, upper, split = locate_boundaries(cum, np.linspace(0.05, 0.95, 19))
    assert np.all((split >= 0.0) & (split <= 1.0))
    assert np.all(np.diff(upper) >= 0)


def test_invalid_cut_points():
    for bad in ([], [0.0, 0.5], [0.5, 1.0], [0.6, 0.4], [0.5, 0.5], [np.nan]):
        with pytest.raises(ShapeMismatch):
            validate_cut_points(bad)


def test_unsorted_cumulative_is_rejected():
    with pytest.raises(ShapeMismatch):
        locate_boundaries([0.5, 0.25, 1.0], [0.3])
    with pytest.raises(ShapeMismatch):
        locate_boundaries([0.25, 0.5], [0.3])
