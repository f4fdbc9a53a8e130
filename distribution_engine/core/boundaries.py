"""
Boundary location on a cumulative weight distribution.

Sorted agent k occupies the cumulative-probability interval

    (cum[k-1], cum[k]]      with cum[-1] := 0

so a cut point d falls inside exactly one agent's interval: the *boundary
agent* u, the first position with cum[u] >= d.  The share of that agent's
weight lying below the cut is interpolated linearly inside its interval:

    split = (d − cum[u-1]) / (cum[u] − cum[u-1])       ∈ [0, 1]

A cut point below cum[0] extrapolates from the origin (lower bracket clamped
to position 0).  A cut point hitting cum[u] exactly gives split = 1: the
boundary agent belongs wholly to the lower side.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import DivisionByZero, ShapeMismatch

# Cumulative sums and linspace cut points disagree in the last ulp; cut points
# within this distance of an agent's upper edge resolve onto that agent.
CUM_TOLERANCE: float = 1e-12


def validate_cut_points(divs: ArrayLike) -> NDArray[np.float64]:
    """Return ``divs`` as a float64 array, checking monotonicity and range.

    Raises:
        ShapeMismatch: if ``divs`` is not a non-empty, strictly increasing
            1-D sequence inside the open interval (0, 1).
    """
    arr = np.asarray(divs, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise ShapeMismatch(
            f"cut points must be a non-empty 1-D sequence, got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise ShapeMismatch(f"cut points must be finite, got {arr.tolist()}")
    if arr[0] <= 0.0 or arr[-1] >= 1.0:
        raise ShapeMismatch(
            f"cut points must lie strictly inside (0, 1), got {arr.tolist()}"
        )
    if np.any(np.diff(arr) <= 0.0):
        raise ShapeMismatch(
            f"cut points must be strictly increasing, got {arr.tolist()}"
        )
    return arr


def cumulative_distribution(sorted_weights: ArrayLike) -> NDArray[np.float64]:
    """Normalised running sum of already-sorted weights (last entry is 1).

    Raises:
        ShapeMismatch: on negative weights.
        DivisionByZero: if the weights sum to zero.
    """
    w = np.asarray(sorted_weights, dtype=np.float64)
    if w.ndim != 1 or w.size == 0:
        raise ShapeMismatch(f"weights must be a non-empty 1-D array, got shape {w.shape}")
    if np.any(w < 0.0):
        raise ShapeMismatch("weights must be non-negative")
    total = float(w.sum())
    if total <= 0.0:
        raise DivisionByZero("population has zero total weight")
    cum = np.cumsum(w) / total
    cum[-1] = 1.0
    return cum


def locate_boundaries(
    cum: ArrayLike,
    divs: ArrayLike,
) -> Tuple[NDArray[np.intp], NDArray[np.intp], NDArray[np.float64]]:
    """Bracket every cut point on a cumulative distribution.

    Args:
        cum:  Non-decreasing cumulative weights of the sorted population,
              ending at 1.
        divs: Strictly increasing cut points in (0, 1).

    Returns:
        ``(index_lower, index_upper, split_weight)``, one entry per cut point.
        ``index_upper`` is the boundary agent, ``index_lower`` the agent just
        below it (equal to ``index_upper`` when the boundary is the first
        agent), and ``split_weight`` the fraction of the boundary agent's
        weight lying below the cut.

    Raises:
        ShapeMismatch: on an unsorted or unnormalised ``cum`` or invalid
            ``divs``.
    """
    cum = np.asarray(cum, dtype=np.float64)
    if cum.ndim != 1 or cum.size == 0:
        raise ShapeMismatch(
            f"cumulative distribution must be non-empty and 1-D, got shape {cum.shape}"
        )
    if np.any(np.diff(cum) < 0.0):
        raise ShapeMismatch("cumulative distribution must be non-decreasing")
    if not np.isclose(cum[-1], 1.0):
        raise ShapeMismatch(
            f"cumulative distribution must end at 1, got {cum[-1]}"
        )
    divs = validate_cut_points(divs)

    index_upper = np.searchsorted(cum, divs - CUM_TOLERANCE, side="left")
    index_upper = np.minimum(index_upper, cum.size - 1)
    index_lower = np.maximum(index_upper - 1, 0)

    cum_below = np.where(index_upper > 0, cum[index_lower], 0.0)
    width = cum[index_upper] - cum_below
    with np.errstate(divide="ignore", invalid="ignore"):
        split = np.where(width > 0.0, (divs - cum_below) / width, 1.0)
    split = np.clip(split, 0.0, 1.0)

    return index_lower.astype(np.intp), index_upper.astype(np.intp), split
