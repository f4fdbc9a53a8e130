"""
Agent groups and group-level statistics.

Helpers that select subsets of agents (by a state code or a predicate) and
summarise them: the population share of a group, and the marginal propensity
to consume along the asset grid.  Indicators produced here double as subgroup
vectors for ``distribution_engine.simulation.mobility``.
"""

from __future__ import annotations

from typing import Callable, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.errors import DivisionByZero, ShapeMismatch
from ..core.statistic import StatKind, Statistic

Criterion = Union[int, Callable[[NDArray], ArrayLike]]


def identify_group(values: ArrayLike, criterion: Criterion) -> NDArray[np.bool_]:
    """Boolean indicator of the agents satisfying ``criterion``.

    Args:
        values:    Per-agent variable (e.g. a state index).
        criterion: Integer code matched by equality, or a vectorised
                   predicate returning one boolean per agent.
    """
    arr = np.asarray(values)
    if callable(criterion):
        mask = np.asarray(criterion(arr), dtype=bool)
    else:
        mask = arr == criterion
    if mask.shape != arr.shape:
        raise ShapeMismatch(
            f"criterion returned shape {mask.shape} for values of shape {arr.shape}"
        )
    return mask


def borrowing_constrained(savings: ArrayLike, lower_bound: Union[float, ArrayLike]) -> NDArray[np.bool_]:
    """Agents whose savings sit at (or below) the borrowing limit."""
    return np.asarray(savings, dtype=np.float64) <= np.asarray(lower_bound, dtype=np.float64)


def group_percentage(
    indicator: ArrayLike,
    weights: ArrayLike,
    key: str,
    description: str = "% of agents in group",
) -> Statistic:
    """Share of the population (by weight) inside a group.

    Raises:
        ShapeMismatch:  indicator and weights differ in shape.
        DivisionByZero: zero total weight.
    """
    mask = np.asarray(indicator, dtype=bool)
    w = np.asarray(weights, dtype=np.float64)
    if mask.shape != w.shape:
        raise ShapeMismatch(f"indicator {mask.shape} and weights {w.shape} differ in shape")
    total = float(w.sum())
    if total <= 0.0:
        raise DivisionByZero("population has zero total weight")
    share = float(np.clip(w[mask].sum() / total, 0.0, 1.0))
    return Statistic(kind=StatKind.PERCENTAGE, value=share, key=key, description=description)


def marginal_propensities(
    consumption: ArrayLike,
    assets: ArrayLike,
    states: ArrayLike,
) -> NDArray[np.float64]:
    """Finite-difference MPC along the asset grid, per exogenous state.

    Within each state the agents are ordered by assets and
    ``mpc_k = (c_{k+1} − c_k) / (a_{k+1} − a_k)``.  The richest agent of every
    state has no right neighbour and gets NaN.

    Args:
        consumption: Consumption policy per agent.
        assets:      Asset holdings per agent.
        states:      Exogenous state code per agent (e.g. productivity index).

    Returns:
        MPC per agent, in the original agent order.
    """
    c = np.asarray(consumption, dtype=np.float64)
    a = np.asarray(assets, dtype=np.float64)
    z = np.asarray(states)
    if not (c.shape == a.shape == z.shape) or c.ndim != 1:
        raise ShapeMismatch(
            f"consumption {c.shape}, assets {a.shape} and states {z.shape} "
            f"must be 1-D and equally long"
        )
    mpc = np.full(c.shape, np.nan)
    for code in np.unique(z):
        members = np.flatnonzero(z == code)
        members = members[np.argsort(a[members], kind="stable")]
        if members.size < 2:
            continue
        with np.errstate(divide="ignore", invalid="ignore"):
            mpc[members[:-1]] = np.diff(c[members]) / np.diff(a[members])
    return mpc


def average_marginal_propensity(
    mpc: ArrayLike,
    weights: ArrayLike,
    key: str = "c",
    description: str = "Average MPC",
) -> Statistic:
    """Population-weighted average MPC over agents where it is defined.

    Raises:
        ShapeMismatch:  mpc and weights differ in shape.
        DivisionByZero: no weight on agents with a defined MPC.
    """
    m = np.asarray(mpc, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if m.shape != w.shape:
        raise ShapeMismatch(f"mpc {m.shape} and weights {w.shape} differ in shape")
    defined = np.isfinite(m)
    total = float(w[defined].sum())
    if total <= 0.0:
        raise DivisionByZero("no weight on agents with a defined MPC")
    value = float(w[defined] @ m[defined]) / total
    return Statistic(kind=StatKind.SHARE, value=value, key=key, description=description)
