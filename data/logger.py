"""SQLite store for sweeper runs and their per-generation fitness statistics."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_HALTED = "halted"
STATUS_STOPPED = "stopped"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS experiment_metadata (
    experiment_id TEXT PRIMARY KEY,
    config_hash TEXT NOT NULL,
    seed INTEGER NOT NULL,
    config_json TEXT NOT NULL,
    runtime_metadata TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'running',
    error TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS generation_stats (
    experiment_id TEXT NOT NULL,
    generation_index INTEGER NOT NULL,
    best_fitness REAL NOT NULL,
    average_fitness REAL NOT NULL,
    worst_fitness REAL NOT NULL,
    PRIMARY KEY (experiment_id, generation_index),
    FOREIGN KEY (experiment_id)
        REFERENCES experiment_metadata (experiment_id)
        ON DELETE CASCADE
);
"""


@dataclass(frozen=True)
class RunSummary:
    """Aggregate view of one stored run."""

    experiment_id: str
    seed: int
    status: str
    error: str | None
    generations: int
    best_fitness: float
    final_average_fitness: float


def _experiment_id(config_json: str, seed: int) -> tuple[str, str, str]:
    """Return ``(experiment_id, config_hash, deterministic_key)``.

    The deterministic key identifies config + seed; the id adds a time nonce
    so repeated runs of the same setup are stored separately.
    """
    config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
    deterministic_key = hashlib.sha256(f"{config_hash}:{seed}".encode("utf-8")).hexdigest()
    nonce = str(time.time_ns())
    experiment_id = hashlib.sha256(f"{deterministic_key}:{nonce}".encode("utf-8")).hexdigest()[:16]
    return experiment_id, config_hash, deterministic_key


class SimulationLogger:
    """Persist run metadata, outcome and per-generation fitness in SQLite.

    Only statistics are stored; genomes never leave the process.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self.connection.executescript(_SCHEMA)
        self.connection.commit()

    def __enter__(self) -> "SimulationLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.connection.close()

    def start_experiment(self, config: Mapping[str, Any], seed: int, metadata: Mapping[str, Any] | None = None) -> str:
        config_json = json.dumps(dict(config), sort_keys=True)
        experiment_id, config_hash, deterministic_key = _experiment_id(config_json, int(seed))
        runtime = {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
            "deterministic_key": deterministic_key,
            **dict(metadata or {}),
        }

        self.connection.execute(
            """
            INSERT OR IGNORE INTO experiment_metadata (
                experiment_id, config_hash, seed, config_json, runtime_metadata, status
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (experiment_id, config_hash, int(seed), config_json, json.dumps(runtime, sort_keys=True), STATUS_RUNNING),
        )
        self.connection.commit()
        return experiment_id

    def finish_experiment(self, experiment_id: str, status: str, error: str | None = None) -> None:
        """Record the terminal outcome of a run."""
        if status not in {STATUS_COMPLETED, STATUS_HALTED, STATUS_STOPPED}:
            raise ValueError(f"Unknown run status: {status!r}")
        self.connection.execute(
            "UPDATE experiment_metadata SET status = ?, error = ? WHERE experiment_id = ?",
            (status, error, experiment_id),
        )
        self.connection.commit()

    def log_generation(
        self,
        experiment_id: str,
        generation_index: int,
        best_fitness: float,
        average_fitness: float,
        worst_fitness: float = 0.0,
    ) -> None:
        self.connection.execute(
            """
            INSERT OR REPLACE INTO generation_stats (
                experiment_id, generation_index, best_fitness, average_fitness, worst_fitness
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (
                experiment_id,
                int(generation_index),
                float(best_fitness),
                float(average_fitness),
                float(worst_fitness),
            ),
        )
        self.connection.commit()

    def fetch_generations(self, experiment_id: str) -> list[dict[str, float]]:
        """Return generation statistics ordered by generation index."""
        rows = self.connection.execute(
            """
            SELECT generation_index, best_fitness, average_fitness, worst_fitness
            FROM generation_stats
            WHERE experiment_id = ?
            ORDER BY generation_index ASC
            """,
            (experiment_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def fetch_config(self, experiment_id: str) -> dict[str, Any] | None:
        row = self.connection.execute(
            "SELECT config_json FROM experiment_metadata WHERE experiment_id = ?",
            (experiment_id,),
        ).fetchone()
        return json.loads(row["config_json"]) if row is not None else None

    def summarize(self, experiment_id: str) -> RunSummary | None:
        meta = self.connection.execute(
            "SELECT seed, status, error FROM experiment_metadata WHERE experiment_id = ?",
            (experiment_id,),
        ).fetchone()
        if meta is None:
            return None
        rows = self.fetch_generations(experiment_id)
        return RunSummary(
            experiment_id=experiment_id,
            seed=int(meta["seed"]),
            status=str(meta["status"]),
            error=meta["error"],
            generations=len(rows),
            best_fitness=max((row["best_fitness"] for row in rows), default=0.0),
            final_average_fitness=rows[-1]["average_fitness"] if rows else 0.0,
        )

    def experiment_ids(self) -> list[str]:
        """Return all experiment ids, oldest first."""
        rows = self.connection.execute(
            "SELECT experiment_id FROM experiment_metadata ORDER BY created_at ASC, rowid ASC"
        ).fetchall()
        return [str(row["experiment_id"]) for row in rows]

    def latest_experiment_id(self) -> str | None:
        """Return the most recently created experiment id, if any."""
        row = self.connection.execute(
            """
            SELECT experiment_id
            FROM experiment_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row["experiment_id"]) if row is not None else None
