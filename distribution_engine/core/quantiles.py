"""
Quantile assignment.

Turns a weighted population into a sparse bucket-membership matrix B of shape
(n_buckets, n_agents).  B[b, a] is the fraction of agent a's weight that sits
in bucket b, so aggregates over buckets are plain matrix-vector products:

    B @ (values * weights)      value-weighted mass per bucket
    B @ weights                 population mass per bucket

Construction:
  1. stable-sort agents by value, carrying weights along;
  2. normalised cumulative weight of the sorted population;
  3. locate the boundary agent and split weight of every cut point;
  4. fill each bucket by kind:
        BOTTOM_OPEN  1 below the boundary agent, ``split`` on it
        INTERIOR     ``1 − split`` on the lower boundary agent, 1 in between,
                     ``split`` on the upper boundary agent
        TOP_OPEN     ``1 − split`` on the boundary agent, 1 above it
  5. skip INTERIOR buckets whose two cut points land on the same agent
     (a jump in the cumulative distribution leaves the bucket with no agent of
     its own) and log a warning; the row stays in place, empty;
  6. map columns back to the original agent order.

Within a FULL partition with no skipped bucket each boundary agent receives
``split`` + ``1 − split`` and every other agent a single 1, so every column
sums to one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import sparse

from .boundaries import cumulative_distribution, locate_boundaries, validate_cut_points
from .errors import ShapeMismatch

logger = logging.getLogger("distribution_engine.quantiles")

CutSpec = Union[int, Sequence[float], NDArray[np.float64]]


class BucketKind(Enum):
    """Which edges a bucket has."""

    BOTTOM_OPEN = "bottom_open"
    INTERIOR = "interior"
    TOP_OPEN = "top_open"


class QuantileType(Enum):
    """How a set of cut points is turned into buckets.

    FULL    one BOTTOM_OPEN, len(cuts) − 1 INTERIOR and one TOP_OPEN bucket
    TOP     one TOP_OPEN bucket per cut point ("top 10%", "top 1%", ...)
    BOTTOM  one BOTTOM_OPEN bucket per cut point ("bottom 50%", ...)
    """

    FULL = "full"
    TOP = "top"
    BOTTOM = "bottom"


# --------------------------------------------------------------------------- #
# Cut points                                                                   #
# --------------------------------------------------------------------------- #


def equal_cut_points(nq: int) -> NDArray[np.float64]:
    """Interior thresholds of ``nq`` equally sized quantiles.

    >>> equal_cut_points(4)
    array([0.25, 0.5 , 0.75])
    """
    if int(nq) != nq or nq < 2:
        raise ShapeMismatch(f"number of quantiles must be an integer >= 2, got {nq}")
    return np.linspace(0.0, 1.0, int(nq) + 1)[1:-1]


def resolve_cut_points(cuts: CutSpec) -> NDArray[np.float64]:
    """Expand a bucket count or validate explicit thresholds."""
    if isinstance(cuts, (int, np.integer)):
        return equal_cut_points(int(cuts))
    return validate_cut_points(cuts)


@dataclass(frozen=True)
class QuantileGroup:
    """One set of cut points and the way it is turned into buckets.

    Attributes:
        cuts:  Bucket count or strictly increasing thresholds in (0, 1).
        qtype: FULL partition, or TOP / BOTTOM open-ended buckets.
    """

    cuts: Tuple[float, ...]
    qtype: QuantileType = QuantileType.FULL

    def __post_init__(self) -> None:
        object.__setattr__(self, "cuts", tuple(float(d) for d in resolve_cut_points(self.cuts)))
        object.__setattr__(self, "qtype", QuantileType(self.qtype))

    @property
    def n_buckets(self) -> int:
        if self.qtype is QuantileType.FULL:
            return len(self.cuts) + 1
        return len(self.cuts)


# --------------------------------------------------------------------------- #
# Bucket matrix                                                                #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BucketMatrix:
    """Immutable bucket-membership matrix.

    Attributes:
        matrix:  CSR matrix of shape (n_buckets, n_agents).
        kinds:   BucketKind of every row.
        skipped: Rows left empty by the degenerate-bucket policy.
    """

    matrix: sparse.csr_matrix
    kinds: Tuple[BucketKind, ...]
    skipped: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.matrix.shape[0] != len(self.kinds):
            raise ShapeMismatch(
                f"{len(self.kinds)} bucket kinds for a matrix with "
                f"{self.matrix.shape[0]} rows"
            )

    @property
    def n_buckets(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def n_agents(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_buckets, self.n_agents)

    def active_mask(self) -> NDArray[np.bool_]:
        """True for every bucket that was not skipped."""
        mask = np.ones(self.n_buckets, dtype=bool)
        mask[list(self.skipped)] = False
        return mask

    def column_sums(self) -> NDArray[np.float64]:
        """Total assignment of each agent across buckets."""
        return np.asarray(self.matrix.sum(axis=0)).ravel()

    def toarray(self) -> NDArray[np.float64]:
        return self.matrix.toarray()

    def __matmul__(self, other):
        return self.matrix @ other


def bucket_operator(
    bucket_matrix: Union[BucketMatrix, sparse.spmatrix, NDArray[np.float64]],
) -> Tuple[sparse.csr_matrix, Tuple[int, ...]]:
    """Return ``(csr_matrix, skipped_rows)`` for a BucketMatrix or a raw matrix.

    Raw matrices (e.g. an identity standing in for "every elemental state")
    have no skipped rows.
    """
    if isinstance(bucket_matrix, BucketMatrix):
        return bucket_matrix.matrix, bucket_matrix.skipped
    return sparse.csr_matrix(bucket_matrix), ()


# --------------------------------------------------------------------------- #
# Per-kind entry builders                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class _Edge:
    """Boundary agent (sorted position) and its weight fraction below the cut."""

    position: int
    split: float


_Entries = Tuple[NDArray[np.intp], NDArray[np.float64]]


def _bottom_open_entries(lower: Optional[_Edge], upper: _Edge, n_agents: int) -> _Entries:
    cols = np.arange(upper.position + 1)
    vals = np.ones(cols.size)
    vals[-1] = upper.split
    return cols, vals


def _interior_entries(lower: _Edge, upper: _Edge, n_agents: int) -> _Entries:
    cols = np.arange(lower.position, upper.position + 1)
    vals = np.ones(cols.size)
    vals[0] = 1.0 - lower.split
    vals[-1] = upper.split
    return cols, vals


def _top_open_entries(lower: _Edge, upper: Optional[_Edge], n_agents: int) -> _Entries:
    cols = np.arange(lower.position, n_agents)
    vals = np.ones(cols.size)
    vals[0] = 1.0 - lower.split
    return cols, vals


_ENTRY_BUILDERS: Dict[BucketKind, Callable[..., _Entries]] = {
    BucketKind.BOTTOM_OPEN: _bottom_open_entries,
    BucketKind.INTERIOR: _interior_entries,
    BucketKind.TOP_OPEN: _top_open_entries,
}


# --------------------------------------------------------------------------- #
# Per-type bucket layouts                                                      #
# --------------------------------------------------------------------------- #

_Layout = List[Tuple[BucketKind, Optional[_Edge], Optional[_Edge]]]


def _full_layout(edges: List[_Edge]) -> _Layout:
    layout: _Layout = [(BucketKind.BOTTOM_OPEN, None, edges[0])]
    for lower, upper in zip(edges[:-1], edges[1:]):
        layout.append((BucketKind.INTERIOR, lower, upper))
    layout.append((BucketKind.TOP_OPEN, edges[-1], None))
    return layout


def _top_layout(edges: List[_Edge]) -> _Layout:
    return [(BucketKind.TOP_OPEN, e, None) for e in edges]


def _bottom_layout(edges: List[_Edge]) -> _Layout:
    return [(BucketKind.BOTTOM_OPEN, None, e) for e in edges]


_LAYOUTS: Dict[QuantileType, Callable[[List[_Edge]], _Layout]] = {
    QuantileType.FULL: _full_layout,
    QuantileType.TOP: _top_layout,
    QuantileType.BOTTOM: _bottom_layout,
}


# --------------------------------------------------------------------------- #
# Builders                                                                     #
# --------------------------------------------------------------------------- #


def _sort_population(
    values: ArrayLike, weights: ArrayLike
) -> Tuple[NDArray[np.intp], NDArray[np.float64]]:
    """Return the stable ascending order of ``values`` and the cumulative weights."""
    values = np.asarray(values, dtype=np.float64)
    weights = np.asarray(weights, dtype=np.float64)
    if values.ndim != 1 or weights.ndim != 1:
        raise ShapeMismatch(
            f"values and weights must be 1-D, got shapes {values.shape} and {weights.shape}"
        )
    if values.shape != weights.shape:
        raise ShapeMismatch(
            f"values ({values.shape[0]}) and weights ({weights.shape[0]}) differ in length"
        )
    order = np.argsort(values, kind="stable")
    return order, cumulative_distribution(weights[order])


def build_stacked_bucket_matrix(
    values: ArrayLike,
    weights: ArrayLike,
    groups: Sequence[QuantileGroup],
) -> BucketMatrix:
    """Concatenate the buckets of several quantile groups into one matrix.

    Bucket indices run on sequentially from one group to the next, so e.g.
    ``[QuantileGroup(10), QuantileGroup((0.9, 0.99), QuantileType.TOP)]``
    yields the ten deciles followed by the top 10% and top 1%.

    Args:
        values:  Variable of interest, one entry per agent.
        weights: Population weight of each agent (any positive scale).
        groups:  Quantile groups applied to the same sorted population.

    Returns:
        BucketMatrix with columns in the original agent order.
    """
    if not groups:
        raise ShapeMismatch("at least one quantile group is required")
    order, cum = _sort_population(values, weights)
    n_agents = cum.size

    rows: List[NDArray[np.intp]] = []
    cols: List[NDArray[np.intp]] = []
    vals: List[NDArray[np.float64]] = []
    kinds: List[BucketKind] = []
    skipped: List[int] = []

    for group in groups:
        _, index_upper, split = locate_boundaries(cum, group.cuts)
        edges = [_Edge(int(u), float(s)) for u, s in zip(index_upper, split)]
        for kind, lower, upper in _LAYOUTS[group.qtype](edges):
            q = len(kinds)
            kinds.append(kind)
            if kind is BucketKind.INTERIOR and lower.position == upper.position:
                logger.warning(
                    f"Quantile {q + 1} does not have enough individuals assigned "
                    f"(both cut points fall on agent {lower.position}). Skipping."
                )
                skipped.append(q)
                continue
            c, v = _ENTRY_BUILDERS[kind](lower, upper, n_agents)
            rows.append(np.full(c.size, q, dtype=np.intp))
            cols.append(c)
            vals.append(v)

    matrix = sparse.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), order[np.concatenate(cols)])),
        shape=(len(kinds), n_agents),
    ).tocsr()
    matrix.eliminate_zeros()
    return BucketMatrix(matrix=matrix, kinds=tuple(kinds), skipped=tuple(skipped))


def build_bucket_matrix(
    values: ArrayLike,
    weights: ArrayLike,
    cuts: CutSpec,
    qtype: QuantileType = QuantileType.FULL,
) -> BucketMatrix:
    """Bucket-membership matrix for a single cut specification.

    Args:
        values:  Variable of interest, one entry per agent.
        weights: Population weight of each agent.
        cuts:    Number of equally sized quantiles, or explicit thresholds.
        qtype:   Bucket layout for the thresholds (FULL partition by default).

    Returns:
        BucketMatrix of shape (n_buckets, n_agents).

    Raises:
        ShapeMismatch: mismatched lengths or invalid cut points.
        DivisionByZero: zero total weight.
    """
    return build_stacked_bucket_matrix(values, weights, [QuantileGroup(cuts, qtype)])
