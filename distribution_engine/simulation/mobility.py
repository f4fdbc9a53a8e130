"""
Mobility forecasts.

Transition matrices are column-stochastic: ``Q_t[j, i]`` is the probability of
moving from elemental state i in period t−1 to state j in period t.  A
distribution (or a 0/1 subgroup indicator) is pushed forward one period per
matrix, strictly in order:

    d_nt = Q_nt · … · Q_2 · Q_1 · d_0

and may then be restated over future quantile buckets with a future bucket
matrix F:

    future distribution    F · d_nt
    future probabilities   F · d_nt / Σ d_0

Consecutive transition matrices may change the size of the state space
(rectangular Q), as long as every product is defined.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import sparse

from ..analysis.quantile_stats import BucketOperand, default_labels, uniform_labels
from ..core.errors import DivisionByZero, HorizonOutOfRange, ShapeMismatch
from ..core.quantiles import bucket_operator
from ..core.statistic import FutureDistr, StatKind, variable_name

logger = logging.getLogger("distribution_engine.mobility")

TransitionMatrix = Union[sparse.spmatrix, NDArray[np.float64]]


def _to_dense(x) -> NDArray[np.float64]:
    if sparse.issparse(x):
        return x.toarray()
    return np.asarray(x, dtype=np.float64)


def propagate(
    distribution: ArrayLike,
    transitions: Sequence[TransitionMatrix],
    nt: Optional[int] = None,
) -> NDArray[np.float64]:
    """Push a distribution ``nt`` periods forward.

    Args:
        distribution: Initial distribution over elemental states, a 0/1
                      subgroup indicator, or a 2-D array whose columns are
                      propagated independently.
        transitions:  Column-stochastic transition matrix of each period ahead.
        nt:           Number of periods (default: all supplied matrices).

    Returns:
        Distribution after ``nt`` periods (a copy when ``nt`` is 0).

    Raises:
        HorizonOutOfRange: ``nt`` is negative or exceeds ``len(transitions)``.
        ShapeMismatch:     a matrix does not accept the current distribution.
    """
    if nt is None:
        nt = len(transitions)
    if nt < 0 or nt > len(transitions):
        raise HorizonOutOfRange(
            f"horizon nt={nt} requires {nt} transition matrices, "
            f"{len(transitions)} supplied"
        )
    current = np.array(distribution, dtype=np.float64)
    if current.ndim not in (1, 2):
        raise ShapeMismatch(f"distribution must be 1-D or 2-D, got shape {current.shape}")
    for t in range(nt):
        q = transitions[t]
        if q.shape[1] != current.shape[0]:
            raise ShapeMismatch(
                f"transition matrix {t + 1} has shape {q.shape}, "
                f"distribution has {current.shape[0]} states"
            )
        current = _to_dense(q @ current)
    logger.debug(f"Propagated distribution over {nt} period(s)")
    return current


def future_distribution(
    subgroup: ArrayLike,
    transitions: Sequence[TransitionMatrix],
    nt: int,
    future_bucket_matrix: BucketOperand,
    key: str,
    labels: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
    subgroup_label: str = "anywhere",
    future_weights: Optional[ArrayLike] = None,
) -> FutureDistr:
    """Mass of ``subgroup`` found in each future bucket after ``nt`` periods.

    Args:
        subgroup:             Initial distribution or 0/1 subgroup indicator.
        transitions:          Transition matrix of each period ahead.
        nt:                   Number of periods ahead.
        future_bucket_matrix: Bucket matrix over the period-nt state space.
        key:                  Variable the future buckets are defined on.
        labels:               Bucket labels.  Defaults to percentile labels
                              from ``future_weights`` when given, else an even
                              split of 0–100.
        description:          Human-readable description.
        subgroup_label:       Description of the initial subgroup.
        future_weights:       Period-nt population weights (labels only).

    Returns:
        FutureDistr of kind SHARE.
    """
    mass = _future_mass(subgroup, transitions, nt, future_bucket_matrix)
    return FutureDistr(
        kind=StatKind.SHARE,
        values=mass,
        labels=_future_labels(future_bucket_matrix, labels, future_weights),
        key=key,
        description=description
        or f"Future distribution of {variable_name(key)} by quantile",
        horizon=nt,
        subgroup_label=subgroup_label,
    )


def future_probabilities(
    subgroup: ArrayLike,
    transitions: Sequence[TransitionMatrix],
    nt: int,
    future_bucket_matrix: BucketOperand,
    key: str,
    labels: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
    subgroup_label: str = "anywhere",
    future_weights: Optional[ArrayLike] = None,
) -> FutureDistr:
    """Probability of reaching each future bucket given membership in ``subgroup``.

    Same propagation as ``future_distribution``, divided by ``sum(subgroup)``.

    Raises:
        DivisionByZero: the subgroup is empty.
    """
    total = float(np.sum(subgroup))
    if total == 0.0:
        raise DivisionByZero("subgroup is empty")
    mass = _future_mass(subgroup, transitions, nt, future_bucket_matrix)
    return FutureDistr(
        kind=StatKind.PROBABILITY,
        values=mass / total,
        labels=_future_labels(future_bucket_matrix, labels, future_weights),
        key=key,
        description=description
        or f"Probability of reaching each future {variable_name(key)} quantile (within cohort)",
        horizon=nt,
        subgroup_label=subgroup_label,
    )


def quantile_transition_matrix(
    bucket_matrix: BucketOperand,
    transitions: Sequence[TransitionMatrix],
    weights: ArrayLike,
    nt: int = 1,
    future_bucket_matrix: Optional[BucketOperand] = None,
) -> NDArray[np.float64]:
    """Bucket-to-bucket transition probabilities over ``nt`` periods.

    Column b is where the mass of today's bucket b ends up: each bucket's
    agents are weighted by their population weight and normalised to one,
    propagated, then restated over the future buckets (today's buckets when
    ``future_bucket_matrix`` is None).

    Returns:
        Array of shape (n_future_buckets, n_buckets); columns of buckets
        skipped today are NaN.

    Raises:
        DivisionByZero: a bucket that was not skipped holds zero weight.
    """
    mat, skipped = bucket_operator(bucket_matrix)
    w = np.asarray(weights, dtype=np.float64)
    if w.shape != (mat.shape[1],):
        raise ShapeMismatch(
            f"bucket matrix covers {mat.shape[1]} agents, weights have shape {w.shape}"
        )
    within = mat.T.toarray() * w[:, None]
    mass = within.sum(axis=0)
    active = np.ones(mass.size, dtype=bool)
    active[list(skipped)] = False
    empty = np.flatnonzero(active & (mass <= 0.0))
    if empty.size:
        raise DivisionByZero(f"bucket(s) {empty.tolist()} have zero total weight")
    with np.errstate(divide="ignore", invalid="ignore"):
        within = within / mass
    within[:, ~active] = 0.0

    future = mat if future_bucket_matrix is None else bucket_operator(future_bucket_matrix)[0]
    result = _to_dense(future @ propagate(within, transitions, nt))
    result[:, ~active] = np.nan
    return result


# --------------------------------------------------------------------------- #
# Internal helpers                                                              #
# --------------------------------------------------------------------------- #


def _future_mass(
    subgroup: ArrayLike,
    transitions: Sequence[TransitionMatrix],
    nt: int,
    future_bucket_matrix: BucketOperand,
) -> NDArray[np.float64]:
    mat, skipped = bucket_operator(future_bucket_matrix)
    d = np.asarray(subgroup, dtype=np.float64)
    if d.ndim != 1:
        raise ShapeMismatch(f"subgroup must be 1-D, got shape {d.shape}")
    propagated = propagate(d, transitions, nt)
    if mat.shape[1] != propagated.shape[0]:
        raise ShapeMismatch(
            f"future bucket matrix covers {mat.shape[1]} states, "
            f"period-{nt} distribution has {propagated.shape[0]}"
        )
    mass = np.asarray(mat @ propagated, dtype=np.float64)
    mass[list(skipped)] = np.nan
    return mass


def _future_labels(future_bucket_matrix, labels, future_weights):
    if labels is not None:
        return tuple(labels)
    if future_weights is not None:
        return default_labels(future_bucket_matrix, future_weights)
    return uniform_labels(bucket_operator(future_bucket_matrix)[0].shape[0])
