"""Command-line interface for PVA-Sim.

  pva-sim run --config configs/base.yaml --scenario demographic --threshold 100
  pva-sim compare --config configs/base.yaml --seed 7

Configuration and threshold errors exit with status 2.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

from pva_sim.analysis import compare_scenarios
from pva_sim.config import (
    SimulationConfig,
    deep_merge,
    default_config,
    load_config,
    override_config,
)
from pva_sim.errors import ConfigurationError, InvalidThresholdError
from pva_sim.extinction import evaluate_quasi_extinction
from pva_sim.model import run_projection
from pva_sim.scenarios import SCENARIOS, scenario_overrides

logger = logging.getLogger(__name__)


def _cli_overrides(args: argparse.Namespace) -> Dict:
    """Nested override dict from the flags that were actually given."""
    simulation = {}
    if args.replicates is not None:
        simulation['replicate_count'] = args.replicates
    if args.years is not None:
        simulation['year_count'] = args.years
    if args.initial is not None:
        simulation['initial_population'] = args.initial
    if args.workers is not None:
        simulation['parallel_workers'] = args.workers
    overrides: Dict = {}
    if simulation:
        overrides['simulation'] = simulation
    if args.threshold is not None:
        overrides['extinction'] = {'threshold': args.threshold}
    return overrides


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Assemble the config: YAML layers, then CLI flags, then --scenario.

    All layers are merged before a single validation, so each config
    warning is emitted once.
    """
    overrides = _cli_overrides(args)
    if getattr(args, 'scenario', None) is not None:
        deep_merge(overrides, scenario_overrides(args.scenario))
    if args.config is not None:
        config = load_config(args.config, args.scenario_file, overrides)
    else:
        if args.scenario_file is not None:
            raise ConfigurationError("--scenario-file requires --config")
        config = override_config(default_config(), overrides)
    return config


def _cmd_run(args: argparse.Namespace) -> int:
    config = build_config(args)
    result = run_projection(config, seed=args.seed)
    qe = evaluate_quasi_extinction(
        result, config.extinction.threshold, config.extinction.rule,
    )
    print(
        f"Quasi-extinction probability (N < {qe.threshold:g}, "
        f"rule={qe.rule}): {qe.probability:.4f} "
        f"[{qe.n_quasi_extinct}/{qe.replicate_count} replicates]"
    )
    print(f"Seed entropy: {result.seed_entropy}")

    if args.csv:
        result.to_csv(args.csv)
        logger.info("Wrote trajectories to %s", args.csv)
    if args.plot:
        from pva_sim.viz import plot_trajectories
        plot_trajectories(result, threshold=qe.threshold, save_path=args.plot)
        logger.info("Wrote trajectory figure to %s", args.plot)
    return 0


def _cmd_compare(args: argparse.Namespace) -> int:
    config = build_config(args)
    names = args.scenarios or list(SCENARIOS)
    table = compare_scenarios(config, names, seed=args.seed)
    print(table.to_string(float_format=lambda v: f"{v:.4f}"))
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=str, default=None,
                        help="Base config YAML (default: built-in defaults)")
    parser.add_argument("--scenario-file", type=str, default=None,
                        help="Scenario override YAML merged over --config")
    parser.add_argument("--replicates", type=int, default=None,
                        help="Override simulation.replicate_count")
    parser.add_argument("--years", type=int, default=None,
                        help="Override simulation.year_count")
    parser.add_argument("--initial", type=float, default=None,
                        help="Override simulation.initial_population")
    parser.add_argument("--workers", type=int, default=None,
                        help="Override simulation.parallel_workers")
    parser.add_argument("--threshold", type=float, default=None,
                        help="Override extinction.threshold")
    parser.add_argument("--seed", type=int, default=None,
                        help="Master RNG seed (default: config seed or fresh entropy)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO, -vv for DEBUG logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pva-sim",
        description="Stochastic population viability analysis.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run one projection and report quasi-extinction risk")
    _add_common(run)
    run.add_argument("--scenario", choices=sorted(SCENARIOS), default=None,
                     help="Apply a named uncertainty scenario")
    run.add_argument("--csv", type=str, default=None,
                     help="Write (replicate, year, population, ...) table to CSV")
    run.add_argument("--plot", type=str, default=None,
                     help="Save trajectory figure (PNG)")
    run.set_defaults(func=_cmd_run)

    compare = sub.add_parser("compare", help="Compare uncertainty scenarios")
    _add_common(compare)
    compare.add_argument("scenarios", nargs="*",
                         help=f"Scenarios to compare (default: all of {', '.join(SCENARIOS)})")
    compare.set_defaults(func=_cmd_compare)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        return args.func(args)
    except (ConfigurationError, InvalidThresholdError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
