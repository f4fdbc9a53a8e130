"""
Distribution Engine.

Distributional statistics over a weighted population of agents (quantile
shares and means, Gini coefficients, group shares) and mobility forecasts of
bucket membership under per-period transition matrices.

Public API:
    build_bucket_matrix       — sparse bucket-membership matrix
    share_statistic           — share of value mass per bucket
    mean_statistic            — mean value per bucket
    gini                      — weighted Gini coefficient
    propagate                 — push a distribution through transition matrices
    future_distribution       — future bucket mass of a subgroup
    future_probabilities      — reach-probabilities of future buckets
    AnalysisParameters        — immutable parameter pack
"""

from .core.errors import AnalysisError, DivisionByZero, HorizonOutOfRange, ShapeMismatch
from .core.boundaries import locate_boundaries
from .core.quantiles import (
    BucketKind,
    BucketMatrix,
    QuantileGroup,
    QuantileType,
    build_bucket_matrix,
    build_stacked_bucket_matrix,
    equal_cut_points,
)
from .core.statistic import FutureDistr, StatDistr, StatKind, Statistic
from .core.parameters import AnalysisParameters
from .analysis.quantile_stats import (
    default_labels,
    mean_statistic,
    quantile_means,
    quantile_shares,
    share_statistic,
    uniform_labels,
)
from .analysis.inequality import gini
from .analysis.groups import (
    average_marginal_propensity,
    group_percentage,
    identify_group,
    marginal_propensities,
)
from .analysis.registry import compute_statistic, compute_statistics
from .analysis.report import StatisticLog
from .simulation.mobility import (
    future_distribution,
    future_probabilities,
    propagate,
    quantile_transition_matrix,
)

__all__ = [
    "AnalysisError",
    "DivisionByZero",
    "HorizonOutOfRange",
    "ShapeMismatch",
    "locate_boundaries",
    "BucketKind",
    "BucketMatrix",
    "QuantileGroup",
    "QuantileType",
    "build_bucket_matrix",
    "build_stacked_bucket_matrix",
    "equal_cut_points",
    "FutureDistr",
    "StatDistr",
    "StatKind",
    "Statistic",
    "AnalysisParameters",
    "default_labels",
    "mean_statistic",
    "quantile_means",
    "quantile_shares",
    "share_statistic",
    "uniform_labels",
    "gini",
    "average_marginal_propensity",
    "group_percentage",
    "identify_group",
    "marginal_propensities",
    "compute_statistic",
    "compute_statistics",
    "StatisticLog",
    "future_distribution",
    "future_probabilities",
    "propagate",
    "quantile_transition_matrix",
]
