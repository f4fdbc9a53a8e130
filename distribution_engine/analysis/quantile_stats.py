"""
Quantile statistics.

Aggregates a bucket-membership matrix B over a population:

    share_b = (B · (v ⊙ w))_b / (v · w)          share of total value mass
    mean_b  = (B · (v ⊙ w))_b / (B · w)_b        weighted mean within bucket

Buckets skipped by the degenerate-bucket policy keep their position in the
output and report NaN, so values always line up with the labels.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import sparse

from ..core.errors import DivisionByZero, ShapeMismatch
from ..core.quantiles import (
    BucketMatrix,
    CutSpec,
    QuantileType,
    bucket_operator,
    build_bucket_matrix,
)
from ..core.statistic import StatDistr, StatKind, variable_name

BucketOperand = Union[BucketMatrix, sparse.spmatrix, NDArray[np.float64]]


def _population(
    mat: sparse.csr_matrix, values: ArrayLike, weights: ArrayLike
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    v = np.asarray(values, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if v.shape != w.shape or v.ndim != 1:
        raise ShapeMismatch(
            f"values {v.shape} and weights {w.shape} must be 1-D and equally long"
        )
    if v.shape[0] != mat.shape[1]:
        raise ShapeMismatch(
            f"bucket matrix covers {mat.shape[1]} agents, population has {v.shape[0]}"
        )
    return v, w


# --------------------------------------------------------------------------- #
# Labels                                                                       #
# --------------------------------------------------------------------------- #


def default_labels(bucket_matrix: BucketOperand, weights: ArrayLike) -> Tuple[str, ...]:
    """Percentile-range labels from the population mass each bucket holds.

    A five-bucket partition of an evenly weighted population gives
    ``("P_0-20", "P_20-40", "P_40-60", "P_60-80", "P_80-100")``.
    """
    mat, _ = bucket_operator(bucket_matrix)
    w = np.asarray(weights, dtype=np.float64)
    if w.shape != (mat.shape[1],):
        raise ShapeMismatch(
            f"bucket matrix covers {mat.shape[1]} agents, weights have shape {w.shape}"
        )
    total = float(w.sum())
    if total <= 0.0:
        raise DivisionByZero("population has zero total weight")
    edges = np.concatenate([[0], np.rint(100.0 * np.cumsum(mat @ w) / total).astype(int)])
    return tuple(f"P_{lo}-{hi}" for lo, hi in zip(edges[:-1], edges[1:]))


def uniform_labels(n_buckets: int) -> Tuple[str, ...]:
    """Labels splitting 0–100 evenly over ``n_buckets`` (no weights needed)."""
    if n_buckets < 1:
        raise ShapeMismatch(f"n_buckets must be >= 1, got {n_buckets}")
    edges = np.linspace(0.0, 100.0, n_buckets + 1)
    return tuple(f"P_{lo:g}-{hi:g}" for lo, hi in zip(edges[:-1], edges[1:]))


# --------------------------------------------------------------------------- #
# Statistics                                                                   #
# --------------------------------------------------------------------------- #


def share_statistic(
    bucket_matrix: BucketOperand,
    values: ArrayLike,
    weights: ArrayLike,
    key: str,
    labels: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
) -> StatDistr:
    """Share of the total value-weighted mass held by each bucket.

    Args:
        bucket_matrix: Bucket-membership matrix (buckets × agents).
        values:        Variable of interest per agent.
        weights:       Population weight per agent.
        key:           Variable key recorded on the statistic.
        labels:        Bucket labels (default: ``default_labels``).
        description:   Human-readable description.

    Returns:
        StatDistr of kind SHARE; sums to 1 when no bucket was skipped.

    Raises:
        ShapeMismatch:  population and matrix disagree in size.
        DivisionByZero: the population's total value mass is zero.
    """
    mat, skipped = bucket_operator(bucket_matrix)
    v, w = _population(mat, values, weights)
    total = float(v @ w)
    if total == 0.0:
        raise DivisionByZero(f"total {variable_name(key)} is zero")
    shares = np.asarray(mat @ (v * w), dtype=np.float64) / total
    shares[list(skipped)] = np.nan
    return StatDistr(
        kind=StatKind.SHARE,
        values=shares,
        labels=tuple(labels) if labels is not None else default_labels(mat, w),
        key=key,
        description=description or f"Share of total {variable_name(key)} by quantile",
    )


def mean_statistic(
    bucket_matrix: BucketOperand,
    values: ArrayLike,
    weights: ArrayLike,
    key: str,
    labels: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
) -> StatDistr:
    """Weighted mean of the variable within each bucket.

    Raises:
        ShapeMismatch:  population and matrix disagree in size.
        DivisionByZero: a bucket that was not skipped holds zero weight.
    """
    mat, skipped = bucket_operator(bucket_matrix)
    v, w = _population(mat, values, weights)
    mass = np.asarray(mat @ w, dtype=np.float64)
    active = np.ones(mass.size, dtype=bool)
    active[list(skipped)] = False
    empty = np.flatnonzero(active & (mass <= 0.0))
    if empty.size:
        raise DivisionByZero(f"bucket(s) {empty.tolist()} have zero total weight")
    means = np.full(mass.size, np.nan)
    means[active] = np.asarray(mat @ (v * w), dtype=np.float64)[active] / mass[active]
    return StatDistr(
        kind=StatKind.MEAN,
        values=means,
        labels=tuple(labels) if labels is not None else default_labels(mat, w),
        key=key,
        description=description or f"Mean {variable_name(key)} by quantile",
    )


def quantile_shares(
    values: ArrayLike,
    weights: ArrayLike,
    cuts: CutSpec,
    key: str,
    qtype: QuantileType = QuantileType.FULL,
    **kwargs,
) -> StatDistr:
    """Build the bucket matrix for ``cuts`` and return ``share_statistic``."""
    bm = build_bucket_matrix(values, weights, cuts, qtype)
    return share_statistic(bm, values, weights, key, **kwargs)


def quantile_means(
    values: ArrayLike,
    weights: ArrayLike,
    cuts: CutSpec,
    key: str,
    qtype: QuantileType = QuantileType.FULL,
    **kwargs,
) -> StatDistr:
    """Build the bucket matrix for ``cuts`` and return ``mean_statistic``."""
    bm = build_bucket_matrix(values, weights, cuts, qtype)
    return mean_statistic(bm, values, weights, key, **kwargs)
