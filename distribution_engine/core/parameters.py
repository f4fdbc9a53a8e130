"""
Analysis parameters.

One immutable, validated parameter pack describes which statistics to compute
over a population and how to bucket it.  Loaded from YAML by
``distribution_engine.config`` or built directly in code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .boundaries import validate_cut_points
from .quantiles import QuantileGroup, QuantileType


@dataclass(frozen=True)
class AnalysisParameters:
    """Immutable, fully validated analysis parameters."""

    # ------------------------------------------------------------------ #
    # Bucketing                                                           #
    # ------------------------------------------------------------------ #
    nq: int = 5
    """Number of equally sized quantiles (>= 2)."""

    cut_points: Optional[Tuple[float, ...]] = None
    """Explicit thresholds in (0, 1); take precedence over nq when set."""

    top_cuts: Tuple[float, ...] = (0.9, 0.99)
    """Thresholds of the top-open buckets reported by "top_shares"."""

    bottom_cuts: Tuple[float, ...] = (0.5,)
    """Thresholds of the bottom-open buckets reported by "bottom_shares"."""

    # ------------------------------------------------------------------ #
    # Reporting                                                           #
    # ------------------------------------------------------------------ #
    statistics: Tuple[str, ...] = ("quantile_shares", "quantile_means", "gini")
    """Registered statistic names to compute."""

    key: str = "a"
    """Variable key the statistics describe."""

    # ------------------------------------------------------------------ #
    # Mobility                                                            #
    # ------------------------------------------------------------------ #
    horizon: int = 1
    """Default forecast horizon in periods (>= 0)."""

    subgroup_label: str = "anywhere"
    """Label of the initial subgroup in forecast records."""

    def __post_init__(self) -> None:
        """Validate every parameter."""
        if int(self.nq) != self.nq or self.nq < 2:
            raise ValueError(f"nq must be an integer >= 2, got {self.nq}")

        for name in ("cut_points", "top_cuts", "bottom_cuts"):
            value = getattr(self, name)
            if value is None:
                continue
            validate_cut_points(value)
            object.__setattr__(self, name, tuple(float(d) for d in value))

        if not self.statistics:
            raise ValueError("statistics must name at least one statistic")
        object.__setattr__(self, "statistics", tuple(self.statistics))

        if not self.key:
            raise ValueError("key must be a non-empty string")

        if self.horizon < 0:
            raise ValueError(f"horizon must be >= 0, got {self.horizon}")

    # ------------------------------------------------------------------ #

    def cut_spec(self) -> Union[int, Tuple[float, ...]]:
        """Explicit cut points if configured, otherwise the bucket count."""
        return self.cut_points if self.cut_points is not None else self.nq

    def quantile_group(self) -> QuantileGroup:
        return QuantileGroup(self.cut_spec(), QuantileType.FULL)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize parameters to a plain dictionary."""
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__  # type: ignore[attr-defined]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisParameters":
        """Deserialize parameters from a plain dictionary."""
        return cls(**data)
