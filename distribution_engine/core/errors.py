"""
Error taxonomy for the distribution engine.

Fatal conditions are exceptions; each also inherits the closest builtin so
callers that already catch ValueError / ZeroDivisionError / IndexError keep
working:

  - ShapeMismatch      : mismatched lengths, bad cut points, bad matrix shapes
  - DivisionByZero     : a bucket, population or subgroup carries no mass
  - HorizonOutOfRange  : fewer transition matrices than requested periods

Degenerate buckets are the only locally recovered condition: they are logged
and skipped by the quantile builder, never raised.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every fatal distribution-engine error."""


class ShapeMismatch(AnalysisError, ValueError):
    """Input vectors, cut points or matrices have incompatible shapes."""


class DivisionByZero(AnalysisError, ZeroDivisionError):
    """A statistic was requested over zero total weight."""


class HorizonOutOfRange(AnalysisError, IndexError):
    """Requested forecast horizon exceeds the supplied transition matrices."""