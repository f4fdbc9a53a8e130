"""
Statistic registry.

Maps the statistic names used in configuration files to builder functions.
Every builder has the signature

    builder(values, weights, params) -> Statistic | StatDistr

and is registered once at import time.  Lookup is by plain string key.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Union

from numpy.typing import ArrayLike

from ..core.parameters import AnalysisParameters
from ..core.quantiles import QuantileType, build_bucket_matrix
from ..core.statistic import StatDistr, Statistic, variable_name
from .inequality import gini
from .quantile_stats import mean_statistic, share_statistic

logger = logging.getLogger("distribution_engine.registry")

StatRecord = Union[Statistic, StatDistr]
StatisticBuilder = Callable[[ArrayLike, ArrayLike, AnalysisParameters], StatRecord]


def _quantile_shares(values, weights, params: AnalysisParameters) -> StatRecord:
    bm = build_bucket_matrix(values, weights, params.cut_spec())
    return share_statistic(bm, values, weights, params.key)


def _quantile_means(values, weights, params: AnalysisParameters) -> StatRecord:
    bm = build_bucket_matrix(values, weights, params.cut_spec())
    return mean_statistic(bm, values, weights, params.key)


def _gini(values, weights, params: AnalysisParameters) -> StatRecord:
    return gini(values, weights, params.key, description=f"Gini coefficient of {variable_name(params.key)}")


def _top_shares(values, weights, params: AnalysisParameters) -> StatRecord:
    bm = build_bucket_matrix(values, weights, params.top_cuts, QuantileType.TOP)
    labels = [f"Top {100.0 * (1.0 - d):g}%" for d in params.top_cuts]
    return share_statistic(
        bm, values, weights, params.key, labels=labels,
        description=f"Share of total {variable_name(params.key)} held by the top",
    )


def _bottom_shares(values, weights, params: AnalysisParameters) -> StatRecord:
    bm = build_bucket_matrix(values, weights, params.bottom_cuts, QuantileType.BOTTOM)
    labels = [f"Bottom {100.0 * d:g}%" for d in params.bottom_cuts]
    return share_statistic(
        bm, values, weights, params.key, labels=labels,
        description=f"Share of total {variable_name(params.key)} held by the bottom",
    )


_BUILTIN_STATISTICS: Dict[str, StatisticBuilder] = {
    "quantile_shares": _quantile_shares,
    "quantile_means": _quantile_means,
    "gini": _gini,
    "top_shares": _top_shares,
    "bottom_shares": _bottom_shares,
}


def discover_statistics() -> Dict[str, StatisticBuilder]:
    """All registered statistics. Returns {name: builder}."""
    return dict(_BUILTIN_STATISTICS)


def compute_statistic(
    name: str,
    values: ArrayLike,
    weights: ArrayLike,
    params: AnalysisParameters,
) -> StatRecord:
    """Compute one registered statistic.

    Raises:
        ValueError: If the statistic name is not registered.
    """
    available = discover_statistics()
    if name not in available:
        raise ValueError(
            f"Unknown statistic '{name}'. Available: {list(available.keys())}"
        )
    logger.info(f"Computing statistic: {name} ({params.key})")
    return available[name](values, weights, params)


def compute_statistics(
    values: ArrayLike,
    weights: ArrayLike,
    params: AnalysisParameters,
    names: Sequence[str] = (),
) -> List[StatRecord]:
    """Compute several statistics (default: ``params.statistics``) in order."""
    return [
        compute_statistic(name, values, weights, params)
        for name in (names or params.statistics)
    ]
