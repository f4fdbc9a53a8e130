"""
config.py — Analysis configuration loader.

Loads YAML analysis configs and converts them to AnalysisParameters objects.

Expected layout:

    defaults:              # optional, applied to every analysis
      bucketing: {nq: 5}
    analyses:
      - name: wealth
        description: Wealth distribution
        bucketing: {nq: 10, top_cuts: [0.9, 0.99]}
        report:    {key: a, statistics: [quantile_shares, top_shares, gini]}
        mobility:  {horizon: 5}

Public API:
    load_analysis_config(path)                  -> raw config dict
    get_analysis_by_name(config, name)          -> analysis dict
    list_analyses(config)                       -> list of (name, description)
    build_analysis_parameters(analysis, defs)   -> AnalysisParameters
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .core.parameters import AnalysisParameters

logger = logging.getLogger("distribution_engine.config")


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading + validation                                                    #
# ─────────────────────────────────────────────────────────────────────────── #

def load_analysis_config(config_path: str = "analysis.yaml") -> Dict[str, Any]:
    """Load and validate an analysis configuration YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    if "analyses" not in config:
        raise ValueError("Config must include an 'analyses' list.")

    for analysis in config["analyses"]:
        if "name" not in analysis:
            raise ValueError("Each analysis must have a 'name' field.")

    logger.info(f"Loaded {len(config['analyses'])} analyses from {path}")
    return config


def get_analysis_by_name(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Retrieve an analysis configuration dict by name."""
    for analysis in config["analyses"]:
        if analysis["name"] == name:
            return analysis
    available = [a["name"] for a in config["analyses"]]
    raise ValueError(f"Analysis '{name}' not found. Available: {available}")


def list_analyses(config: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Return list of (name, description) for all analyses."""
    return [
        (a["name"], a.get("description", "").strip())
        for a in config["analyses"]
    ]


# ─────────────────────────────────────────────────────────────────────────── #
# Analysis → AnalysisParameters conversion                                     #
# ─────────────────────────────────────────────────────────────────────────── #

# Maps each YAML section → the AnalysisParameters fields it may set
_SECTION_FIELDS: Dict[str, Tuple[str, ...]] = {
    "bucketing": ("nq", "cut_points", "top_cuts", "bottom_cuts"),
    "report":    ("statistics", "key"),
    "mobility":  ("horizon", "subgroup_label"),
}

_LIST_FIELDS = {"cut_points", "top_cuts", "bottom_cuts", "statistics"}


def _collect(source: Dict[str, Any], kwargs: Dict[str, Any]) -> None:
    for section_name, fields in _SECTION_FIELDS.items():
        section = source.get(section_name, {})
        if not isinstance(section, dict):
            continue
        for key, value in section.items():
            if key not in fields:
                warnings.warn(
                    f"Unknown field '{key}' in section '{section_name}' ignored"
                )
                continue
            kwargs[key] = tuple(value) if key in _LIST_FIELDS and value is not None else value


def build_analysis_parameters(
    analysis: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
) -> AnalysisParameters:
    """
    Convert an analysis configuration dict to an AnalysisParameters instance.

    Values from ``defaults`` are applied first, then the analysis' own
    sections.  Fields not present in either fall back to the
    AnalysisParameters defaults.

    Args:
        analysis: An analysis dict from get_analysis_by_name().
        defaults: The config's top-level ``defaults`` block, if any.

    Returns:
        AnalysisParameters configured for this analysis.
    """
    kwargs: Dict[str, Any] = {}
    _collect(defaults or {}, kwargs)
    _collect(analysis, kwargs)
    return AnalysisParameters(**kwargs)
