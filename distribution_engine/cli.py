"""
Command-line interface for the distribution engine.

Usage:
    python -m distribution_engine.cli [--log-level LEVEL] command [options]

Commands:
    summarize   Distributional statistics of one population (.npz with
                ``values`` and ``weights`` arrays).
    forecast    Future quantile distribution after propagating an initial
                distribution through transition matrices saved with
                ``scipy.sparse.save_npz``.
    info        Print default parameters and registered statistics.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from .analysis.registry import compute_statistics, discover_statistics
from .analysis.report import StatisticLog
from .config import build_analysis_parameters, get_analysis_by_name, load_analysis_config
from .core.parameters import AnalysisParameters
from .core.quantiles import build_bucket_matrix
from .core.statistic import StatDistr, Statistic
from .simulation.mobility import future_distribution, future_probabilities

logger = logging.getLogger("distribution_engine.cli")


def _build_subparsers(parser: argparse.ArgumentParser) -> None:
    """Register all sub-commands on the root parser."""
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------ summarize --
    sum_p = sub.add_parser("summarize", help="Statistics of one population")
    sum_p.add_argument(
        "population", type=str,
        help="Path to .npz archive with 'values' and 'weights' arrays"
    )
    sum_p.add_argument(
        "--config", type=str, default=None,
        help="Analysis configuration YAML"
    )
    sum_p.add_argument(
        "--analysis", type=str, default=None, metavar="NAME",
        help="Analysis to run from --config (default: the first one)"
    )
    sum_p.add_argument(
        "--nq", type=int, default=None, metavar="N",
        help="Number of equally sized quantiles (overrides the config)"
    )
    sum_p.add_argument(
        "--key", type=str, default=None,
        help="Variable key, e.g. 'a' for assets (overrides the config)"
    )
    sum_p.add_argument(
        "--statistics", nargs="+", default=None, metavar="NAME",
        help="Registered statistics to compute (overrides the config)"
    )
    sum_p.add_argument("--json", action="store_true", help="Output as JSON")
    sum_p.add_argument(
        "--output", type=str, default=None,
        help="Save results JSON to this path"
    )

    # ------------------------------------------------------------- forecast --
    fc_p = sub.add_parser("forecast", help="Future quantile distribution")
    fc_p.add_argument(
        "initial", type=str,
        help="Path to .npz archive with the initial 'weights' array"
    )
    fc_p.add_argument(
        "--transitions", nargs="+", required=True, metavar="NPZ",
        help="Sparse transition matrix of each period ahead, in order"
    )
    fc_p.add_argument(
        "--future-population", type=str, required=True, metavar="NPZ",
        help="Period-nt population (.npz with 'values' and 'weights')"
    )
    fc_p.add_argument(
        "--nt", type=int, default=None,
        help="Number of periods ahead (default: number of transition matrices)"
    )
    fc_p.add_argument("--nq", type=int, default=5, metavar="N")
    fc_p.add_argument("--key", type=str, default="a")
    fc_p.add_argument(
        "--subgroup", type=str, default=None, metavar="ARRAY",
        help="Name of a 0/1 indicator array in the initial archive"
    )
    fc_p.add_argument("--json", action="store_true", help="Output as JSON")

    # ----------------------------------------------------------------- info --
    sub.add_parser("info", help="Print default parameters and statistics")


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #


def _load_population(path: str) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    with np.load(path) as data:
        missing = {"values", "weights"} - set(data.files)
        if missing:
            raise KeyError(f"{path} is missing arrays: {sorted(missing)}")
        return data["values"], data["weights"]


def _resolve_parameters(args: argparse.Namespace) -> AnalysisParameters:
    if args.config:
        config = load_analysis_config(args.config)
        name = args.analysis or config["analyses"][0]["name"]
        params = build_analysis_parameters(
            get_analysis_by_name(config, name), config.get("defaults")
        )
    else:
        params = AnalysisParameters()

    overrides = params.to_dict()
    if args.nq is not None:
        overrides["nq"] = args.nq
        overrides["cut_points"] = None
    if args.key is not None:
        overrides["key"] = args.key
    if args.statistics:
        overrides["statistics"] = tuple(args.statistics)
    return AnalysisParameters.from_dict(overrides)


def _print_record(stat) -> None:
    if isinstance(stat, StatDistr):
        print(f"{stat.description}:")
        for label, text in stat.formatted().items():
            print(f"  {label:<14} {text}")
    elif isinstance(stat, Statistic):
        print(f"{stat.description}: {stat.formatted()}")


def _emit(log: StatisticLog, as_json: bool, output: Optional[str] = None) -> None:
    if as_json:
        print(json.dumps(log.to_dicts(), indent=2))
    else:
        for stat in log.records():
            _print_record(stat)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(log.to_dicts(), f, indent=2)
        print(f"\n  Results saved to {output_path}")


# --------------------------------------------------------------------------- #
# Commands                                                                     #
# --------------------------------------------------------------------------- #


def _cmd_summarize(args: argparse.Namespace) -> None:
    """Execute the summarize sub-command."""
    params = _resolve_parameters(args)
    values, weights = _load_population(args.population)
    log = StatisticLog()
    log.extend(compute_statistics(values, weights, params))
    _emit(log, args.json, args.output)


def _cmd_forecast(args: argparse.Namespace) -> None:
    """Execute the forecast sub-command."""
    with np.load(args.initial) as data:
        initial = np.asarray(data["weights"], dtype=np.float64)
        subgroup_label = "anywhere"
        if args.subgroup:
            initial = initial * np.asarray(data[args.subgroup], dtype=bool)
            subgroup_label = args.subgroup
    transitions: List[sparse.spmatrix] = [sparse.load_npz(p) for p in args.transitions]
    logger.info(f"Loaded {len(transitions)} transition matrices")
    nt = args.nt if args.nt is not None else len(transitions)

    future_values, future_weights = _load_population(args.future_population)
    future_bm = build_bucket_matrix(future_values, future_weights, args.nq)

    log = StatisticLog()
    common = dict(
        key=args.key, subgroup_label=subgroup_label, future_weights=future_weights,
    )
    log.record(future_distribution(initial, transitions, nt, future_bm, **common))
    log.record(future_probabilities(initial, transitions, nt, future_bm, **common))
    _emit(log, args.json)


def _cmd_info(_args: argparse.Namespace) -> None:
    """Execute the info sub-command."""
    params = AnalysisParameters()
    print("Distribution Engine")
    print("Default AnalysisParameters:")
    for name, value in params.to_dict().items():
        print(f"  {name}: {value}")
    print("Registered statistics:")
    for name in discover_statistics():
        print(f"  {name}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="distribution_engine",
        description="Distributional statistics and mobility forecasts",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    _build_subparsers(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "summarize":
        _cmd_summarize(args)
    elif args.command == "forecast":
        _cmd_forecast(args)
    elif args.command == "info":
        _cmd_info(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
