"""Analysis: quantile statistics, inequality, groups, registry and reporting."""
from .quantile_stats import (
    default_labels,
    mean_statistic,
    quantile_means,
    quantile_shares,
    share_statistic,
    uniform_labels,
)
from .inequality import gini
from .groups import (
    average_marginal_propensity,
    borrowing_constrained,
    group_percentage,
    identify_group,
    marginal_propensities,
)
from .registry import compute_statistic, compute_statistics, discover_statistics
from .report import StatisticLog

__all__ = [
    "default_labels",
    "mean_statistic",
    "quantile_means",
    "quantile_shares",
    "share_statistic",
    "uniform_labels",
    "gini",
    "average_marginal_propensity",
    "borrowing_constrained",
    "group_percentage",
    "identify_group",
    "marginal_propensities",
    "compute_statistic",
    "compute_statistics",
    "discover_statistics",
    "StatisticLog",
]
