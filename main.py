"""Simple simulation runner for local validation."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, SweeperConfig
from core.deterministic_rng import DeterministicRNG
from core.event_bus import EventBus
from data.logger import SimulationLogger
from engine.simulator import SweeperSimulator


def build_components(
    config: SweeperConfig,
    logger: SimulationLogger | None = None,
    event_bus: EventBus | None = None,
) -> SweeperSimulator:
    """Build a simulator from a validated configuration."""
    return SweeperSimulator(
        config=config,
        rng=DeterministicRNG(config.seed),
        logger=logger,
        event_bus=event_bus,
    )


def main(config_path: str = "configs/default.yaml") -> None:
    """Load config, build components, and run the configured generations."""
    logging.basicConfig(level=logging.INFO)
    config = ConfigLoader.load(config_path)
    with SimulationLogger(Path("simulation_metrics.db")) as logger:
        simulator = build_components(config=config, logger=logger)
        simulator.run(config.generations)
    print(simulator.render_state().info_text())


if __name__ == "__main__":
    main()
