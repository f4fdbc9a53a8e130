"""
Inequality measures.

Weighted Gini coefficient from the trapezoidal Lorenz curve.  With agents
sorted by value, weights normalised to sum one and

    S_0 = 0,   S_i = S_{i−1} + v_i · w_i

the area under the Lorenz curve is Σ w_i (S_{i−1} + S_i) / (2 S_N), so

    Gini = 1 − Σ_i w_i (S_{i−1} + S_i) / S_N

Gini = 0 when every agent holds the same value and approaches 1 as the value
concentrates on agents with vanishing weight.  Normalising the weights makes
the result invariant to their scale.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from ..core.errors import DivisionByZero, ShapeMismatch
from ..core.statistic import StatKind, Statistic


def gini(
    values: ArrayLike,
    weights: ArrayLike,
    key: str,
    description: str = "Gini coefficient",
) -> Statistic:
    """Gini coefficient of a weighted variable.

    Args:
        values:      Variable of interest per agent.
        weights:     Population weight per agent (any positive scale).
        key:         Variable key recorded on the statistic.
        description: Human-readable description.

    Returns:
        Statistic of kind SHARE.

    Raises:
        ShapeMismatch:  values and weights differ in shape.
        DivisionByZero: zero total weight or zero total value mass.
    """
    v = np.asarray(values, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if v.shape != w.shape or v.ndim != 1:
        raise ShapeMismatch(
            f"values {v.shape} and weights {w.shape} must be 1-D and equally long"
        )
    total_weight = float(w.sum())
    if total_weight <= 0.0:
        raise DivisionByZero("population has zero total weight")

    order = np.argsort(v, kind="stable")
    v_sorted = v[order]
    w_sorted = w[order] / total_weight

    s = np.concatenate([[0.0], np.cumsum(v_sorted * w_sorted)])
    if s[-1] == 0.0:
        raise DivisionByZero(f"total {key} is zero; Gini is undefined")
    value = 1.0 - float(w_sorted @ (s[:-1] + s[1:])) / s[-1]
    return Statistic(kind=StatKind.SHARE, value=value, key=key, description=description)
