"""
Statistic records handed to the reporting layer.

Three immutable containers, all tagged with a StatKind:
  - Statistic    : one scalar (Gini, % borrowing-constrained, average MPC)
  - StatDistr    : one value per bucket plus parallel labels
  - FutureDistr  : StatDistr forecast ``horizon`` periods ahead for a subgroup

Records never expose bucket matrices; consumers only see values, labels,
the variable key and a description.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Tuple

import numpy as np
from numpy.typing import NDArray


class StatKind(Enum):
    """Aggregation kind of a statistic record."""

    SHARE = "share"
    PERCENTAGE = "percentage"
    MEAN = "mean"
    PROBABILITY = "probability"


def _as_percent(x: float) -> str:
    if math.isnan(x):
        return "n/a"
    return f"{100.0 * x:.2f}%"


def _as_level(x: float) -> str:
    if math.isnan(x):
        return "n/a"
    return f"{x:.4g}"


_FORMATTERS: Dict[StatKind, Callable[[float], str]] = {
    StatKind.SHARE: _as_percent,
    StatKind.PERCENTAGE: _as_percent,
    StatKind.PROBABILITY: _as_percent,
    StatKind.MEAN: _as_level,
}


def format_value(kind: StatKind, value: float) -> str:
    """Render one value the way its kind is read (fractions as percentages)."""
    return _FORMATTERS[kind](float(value))


# Short variable keys used by the solver layer → readable names.
VARIABLE_NAMES: Dict[str, str] = {
    "a": "assets",
    "c": "consumption",
    "y": "income",
    "z": "productivity",
    "w": "wealth",
    "l": "labour supply",
}


def variable_name(key: str) -> str:
    """Return the readable name of a variable key (the key itself if unknown)."""
    return VARIABLE_NAMES.get(key, key)


# --------------------------------------------------------------------------- #
# Records                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Statistic:
    """Scalar statistic.

    Attributes:
        kind:        Aggregation kind.
        value:       The scalar.
        key:         Variable key (e.g. ``"a"`` for assets).
        description: Human-readable description.
    """

    kind: StatKind
    value: float
    key: str
    description: str

    def __post_init__(self) -> None:
        if self.kind is StatKind.PERCENTAGE and not (0.0 <= self.value <= 1.0):
            raise ValueError(
                f"PERCENTAGE statistic must be in [0, 1], got {self.value}"
            )

    def formatted(self) -> str:
        return format_value(self.kind, self.value)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return {
            "kind": self.kind.value,
            "value": float(self.value),
            "key": self.key,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Statistic":
        """Deserialise from plain dictionary."""
        return cls(
            kind=StatKind(data["kind"]),
            value=float(data["value"]),
            key=data["key"],
            description=data["description"],
        )


@dataclass(frozen=True)
class StatDistr:
    """Bucket-indexed statistic.

    ``values[i]`` belongs to the bucket labelled ``labels[i]``. Buckets skipped
    by the degenerate-bucket policy keep their slot and hold NaN.
    """

    kind: StatKind
    values: NDArray[np.float64]
    labels: Tuple[str, ...]
    key: str
    description: str

    def __post_init__(self) -> None:
        values = np.asarray(self.values, dtype=np.float64)
        if values.ndim != 1:
            raise ValueError(f"values must be 1-D, got shape {values.shape}")
        labels = tuple(self.labels)
        if len(labels) != values.shape[0]:
            raise ValueError(
                f"{len(labels)} labels for {values.shape[0]} values"
            )
        # frozen: bypass __setattr__ to store normalised copies
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "labels", labels)

    def __len__(self) -> int:
        return len(self.labels)

    def items(self):
        """Iterate ``(label, value)`` pairs in bucket order."""
        return zip(self.labels, (float(v) for v in self.values))

    def formatted(self) -> Dict[str, str]:
        return {lab: format_value(self.kind, v) for lab, v in self.items()}

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary (NaN sentinels become None)."""
        return {
            "kind": self.kind.value,
            "values": [None if math.isnan(v) else v for _, v in self.items()],
            "labels": list(self.labels),
            "key": self.key,
            "description": self.description,
        }


@dataclass(frozen=True)
class FutureDistr(StatDistr):
    """Bucket-indexed statistic forecast ``horizon`` periods ahead.

    Attributes:
        horizon:        Number of periods ahead (nt).
        subgroup_label: Description of the initial subgroup.
    """

    horizon: int = 1
    subgroup_label: str = field(default="anywhere")

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.horizon < 0:
            raise ValueError(f"horizon must be >= 0, got {self.horizon}")

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["horizon"] = int(self.horizon)
        out["subgroup_label"] = self.subgroup_label
        return out
