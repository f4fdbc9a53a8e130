"""Simulation: mobility forecasts over transition matrices."""
from .mobility import (
    future_distribution,
    future_probabilities,
    propagate,
    quantile_transition_matrix,
)

__all__ = [
    "future_distribution",
    "future_probabilities",
    "propagate",
    "quantile_transition_matrix",
]
