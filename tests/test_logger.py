"""Tests for the SQLite-backed experiment logger."""

from __future__ import annotations

import json
import sqlite3

import pytest

from data.logger import SimulationLogger


def test_logger_persists_metadata_and_generation_stats(tmp_path) -> None:
    db_path = tmp_path / "nested" / "metrics.db"
    logger = SimulationLogger(db_path)

    experiment_id = logger.start_experiment(
        config={"num_sweepers": 30, "generations": 2},
        seed=42,
        metadata={"weight_count": 44},
    )
    logger.log_generation(experiment_id, 0, best_fitness=3.0, average_fitness=1.25, worst_fitness=0.0)
    logger.log_generation(experiment_id, 1, best_fitness=5.0, average_fitness=2.0)
    logger.close()

    conn = sqlite3.connect(db_path)
    metadata = conn.execute("SELECT seed, config_json, runtime_metadata FROM experiment_metadata").fetchall()
    stats_count = conn.execute("SELECT COUNT(*) FROM generation_stats").fetchone()[0]
    conn.close()

    assert len(metadata) == 1
    assert metadata[0][0] == 42
    assert json.loads(metadata[0][1]) == {"generations": 2, "num_sweepers": 30}
    assert json.loads(metadata[0][2])["weight_count"] == 44
    assert stats_count == 2


def test_fetch_generations_is_ordered_and_replaces_duplicates(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "metrics.db")
    experiment_id = logger.start_experiment(config={"seed": 1}, seed=1)

    logger.log_generation(experiment_id, 1, best_fitness=4.0, average_fitness=2.0)
    logger.log_generation(experiment_id, 0, best_fitness=1.0, average_fitness=0.5)
    logger.log_generation(experiment_id, 1, best_fitness=6.0, average_fitness=3.0)

    rows = logger.fetch_generations(experiment_id)
    logger.close()

    assert [row["generation_index"] for row in rows] == [0, 1]
    assert rows[1]["best_fitness"] == 6.0
    assert rows[1]["average_fitness"] == 3.0


def test_run_outcome_and_summary(tmp_path) -> None:
    with SimulationLogger(tmp_path / "metrics.db") as logger:
        experiment_id = logger.start_experiment(config={"seed": 4}, seed=4)
        assert logger.summarize(experiment_id).status == "running"

        logger.log_generation(experiment_id, 0, best_fitness=2.0, average_fitness=0.5)
        logger.log_generation(experiment_id, 1, best_fitness=1.0, average_fitness=0.75)
        logger.finish_experiment(experiment_id, "halted", "Wrong amount of neural network inputs!")
        summary = logger.summarize(experiment_id)

        with pytest.raises(ValueError):
            logger.finish_experiment(experiment_id, "exploded")
        assert logger.summarize("missing") is None

    assert summary.seed == 4
    assert summary.status == "halted"
    assert summary.error == "Wrong amount of neural network inputs!"
    assert summary.generations == 2
    assert summary.best_fitness == 2.0
    assert summary.final_average_fitness == 0.75


def test_latest_experiment_and_missing_lookups(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "metrics.db")

    assert logger.latest_experiment_id() is None
    assert logger.fetch_config("missing") is None

    first = logger.start_experiment(config={"seed": 1}, seed=1)
    second = logger.start_experiment(config={"seed": 2}, seed=2)

    assert first != second
    assert logger.latest_experiment_id() == second
    assert logger.fetch_config(first) == {"seed": 1}
    assert logger.fetch_generations("missing") == []
    assert logger.experiment_ids() == [first, second]
    logger.close()
