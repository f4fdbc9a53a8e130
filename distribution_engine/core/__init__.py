"""Core: boundary location, quantile assignment, statistic records, errors."""
from .errors import AnalysisError, DivisionByZero, HorizonOutOfRange, ShapeMismatch
from .boundaries import cumulative_distribution, locate_boundaries, validate_cut_points
from .quantiles import (
    BucketKind,
    BucketMatrix,
    QuantileGroup,
    QuantileType,
    build_bucket_matrix,
    build_stacked_bucket_matrix,
    equal_cut_points,
)
from .statistic import FutureDistr, StatDistr, StatKind, Statistic, variable_name
from .parameters import AnalysisParameters

__all__ = [
    "AnalysisError",
    "DivisionByZero",
    "HorizonOutOfRange",
    "ShapeMismatch",
    "cumulative_distribution",
    "locate_boundaries",
    "validate_cut_points",
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
    "variable_name",
    "AnalysisParameters",
]
