"""Command-line entry points: run, batch, plot, stats and runs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, SweeperConfig
from data.logger import SimulationLogger
from main import build_components
from visualization.plotting import format_run_summary, format_statistics_table, plot_experiment

LOGGER = logging.getLogger(__name__)

DEFAULT_DB = "simulation_metrics.db"


def _run_single(config: SweeperConfig, db_path: Path) -> str:
    """Run one configured experiment and return its id.

    Raises:
        RuntimeError: The simulation halted on a configuration mismatch.
    """
    with SimulationLogger(db_path) as logger:
        simulator = build_components(config=config, logger=logger)
        LOGGER.info(
            "Running %d generations of %d sweepers (seed=%d)",
            config.generations,
            config.num_sweepers,
            config.seed,
        )
        simulator.run(config.generations)
        experiment_id = simulator.experiment_id
    if simulator.halted:
        raise RuntimeError(f"Simulation halted: {simulator.error}")
    if experiment_id is None:
        raise RuntimeError("Expected experiment id when logger is configured.")
    return experiment_id


def _resolve_experiment(db_path: Path, experiment_id: str | None) -> str:
    if experiment_id:
        return experiment_id
    with SimulationLogger(db_path) as logger:
        latest = logger.latest_experiment_id()
    if latest is None:
        raise RuntimeError(f"No experiments recorded in {db_path}.")
    LOGGER.info("Using latest experiment %s", latest)
    return latest


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sweepers", description="Evolve minesweeper agents with a genetic algorithm.")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="run one experiment")
    run_cmd.add_argument("--config", default="configs/default.yaml")
    run_cmd.add_argument("--db", default=DEFAULT_DB)
    run_cmd.add_argument("--generations", type=int, default=None)
    run_cmd.add_argument("--seed", type=int, default=None)

    batch_cmd = sub.add_parser("batch", help="run every experiment in a batch file")
    batch_cmd.add_argument("--config", default="configs/example_batch.yaml")
    batch_cmd.add_argument("--db", default=DEFAULT_DB)

    plot_cmd = sub.add_parser("plot", help="plot best/average fitness per generation")
    plot_cmd.add_argument("--experiment", default=None)
    plot_cmd.add_argument("--db", default=DEFAULT_DB)
    plot_cmd.add_argument("--out", default="artifacts/fitness.png")

    stats_cmd = sub.add_parser("stats", help="print the per-generation statistics table")
    stats_cmd.add_argument("--experiment", default=None)
    stats_cmd.add_argument("--db", default=DEFAULT_DB)

    runs_cmd = sub.add_parser("runs", help="list stored experiments")
    runs_cmd.add_argument("--db", default=DEFAULT_DB)
    return parser


def run_cli(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    db_path = Path(args.db)

    if args.command == "run":
        config = ConfigLoader.load(args.config).with_overrides(generations=args.generations, seed=args.seed)
        print(_run_single(config, db_path))
        return 0

    if args.command == "batch":
        for config in ConfigLoader.load_many(args.config):
            print(_run_single(config, db_path))
        return 0

    if args.command == "plot":
        experiment_id = _resolve_experiment(db_path, args.experiment)
        print(plot_experiment(db_path, experiment_id, args.out))
        return 0

    if args.command == "stats":
        experiment_id = _resolve_experiment(db_path, args.experiment)
        with SimulationLogger(db_path) as logger:
            rows = logger.fetch_generations(experiment_id)
            summary = logger.summarize(experiment_id)
        sys.stdout.write(format_statistics_table(rows))
        if summary is not None:
            sys.stderr.write(format_run_summary(summary))
        return 0

    if args.command == "runs":
        with SimulationLogger(db_path) as logger:
            summaries = [logger.summarize(experiment_id) for experiment_id in logger.experiment_ids()]
        for summary in summaries:
            if summary is not None:
                sys.stdout.write(format_run_summary(summary))
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
