"""Fitness plots and text tables built from stored generation statistics."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import matplotlib.pyplot as plt

from data.logger import RunSummary, SimulationLogger

TABLE_HEADER = "Generation\tBest Fitness\tAverage Fitness"


def plot_experiment(db_path: str | Path, experiment_id: str, output_path: str | Path) -> Path:
    """Save a best/average fitness chart for ``experiment_id`` and return its path."""
    with SimulationLogger(db_path) as logger:
        rows = logger.fetch_generations(experiment_id)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    generations = [int(row["generation_index"]) for row in rows]

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(generations, [float(row["best_fitness"]) for row in rows], label="best", color="tab:red")
    ax.plot(generations, [float(row["average_fitness"]) for row in rows], label="average", color="tab:blue")
    ax.set_xlabel("generation")
    ax.set_ylabel("mines collected")
    ax.set_title(f"experiment {experiment_id}")
    ax.grid(alpha=0.3)
    ax.legend(loc="upper left")

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output


def format_statistics_table(rows: Sequence[Mapping[str, float]]) -> str:
    """Tab-separated generation / best / average table, one line per generation."""
    lines = [TABLE_HEADER]
    lines.extend(
        f"{int(row['generation_index'])}\t{float(row['best_fitness']):g}\t{float(row['average_fitness']):g}"
        for row in rows
    )
    return "\n".join(lines) + "\n"


def format_run_summary(summary: RunSummary) -> str:
    line = (
        f"{summary.experiment_id}\tseed={summary.seed}\t{summary.status}\t"
        f"generations={summary.generations}\tbest={summary.best_fitness:g}\t"
        f"average={summary.final_average_fitness:g}"
    )
    if summary.error:
        line += f"\terror={summary.error}"
    return line + "\n"
