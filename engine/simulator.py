"""Simulation driver: per-tick sweeper updates and generation epochs."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any

from agents.genome import Genome, Population
from agents.sweeper import Sweeper
from configs.loader import SweeperConfig
from core import event_bus as events
from core.deterministic_rng import (
    EVOLUTION_STREAM,
    SWEEPERS_STREAM,
    TARGETS_STREAM,
    DeterministicRNG,
)
from core.event_bus import EventBus
from core.render_state import ArenaState, RenderState, SweeperState
from data.logger import STATUS_COMPLETED, STATUS_HALTED, STATUS_STOPPED, SimulationLogger
from environment.arena import Arena
from evolution.ga import GeneticAlgorithm
from network.neural_net import WeightCountError

LOGGER = logging.getLogger(__name__)

INPUT_MISMATCH_MESSAGE = "Wrong amount of neural network inputs!"


class SimulatorState(str, enum.Enum):
    """Execution states of the driver."""

    RUNNING = "running"
    HALTED = "halted"


class TickOutcome(str, enum.Enum):
    """What a single ``tick()`` call did."""

    STEPPED = "stepped"
    EPOCH = "epoch"
    HALTED = "halted"


@dataclass(frozen=True)
class GenerationStats:
    """Statistics emitted once per completed generation."""

    generation: int
    best_fitness: float
    average_fitness: float
    worst_fitness: float = 0.0


class SweeperSimulator:
    """Drives sweepers through ticks and hands scored genomes to the GA.

    Lifecycle per generation:
      1) ``ticks_per_generation`` sensing ticks: every sweeper senses, moves,
         wraps, and may capture a target; fitness is mirrored into its genome,
      2) one epoch tick: the GA breeds a new population, weights are pushed
         back into the sweepers by index, and every sweeper respawns.

    Sweeper ``i`` always corresponds to genome ``i``.
    """

    def __init__(
        self,
        config: SweeperConfig,
        rng: DeterministicRNG | None = None,
        logger: SimulationLogger | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config
        self.rng = rng or DeterministicRNG(config.seed)
        self.logger = logger
        self.event_bus = event_bus

        self.arena = Arena(
            width=config.arena_width,
            height=config.arena_height,
            target_count=config.num_targets,
            rng=self.rng.stream(TARGETS_STREAM),
        )

        topology = config.network_topology()
        spawn_rng = self.rng.stream(SWEEPERS_STREAM)
        self.sweepers: list[Sweeper] = [
            Sweeper.spawn(
                topology=topology,
                max_turn_rate=config.max_turn_rate,
                bounds=(self.arena.width, self.arena.height),
                rng=spawn_rng,
            )
            for _ in range(config.num_sweepers)
        ]

        self.ga = GeneticAlgorithm(
            population_size=config.num_sweepers,
            chromosome_length=topology.total_weight_count(),
            crossover_rate=config.crossover_rate,
            mutation_rate=config.mutation_rate,
            max_perturbation=config.max_perturbation,
            elite_count=config.elite_count,
            elite_copies=config.elite_copies,
            rng=self.rng.stream(EVOLUTION_STREAM),
        )
        self.population: Population = self.ga.chromosomes

        self.tick_count = 0
        self.generation = 0
        self.statistics: list[GenerationStats] = []
        self.error: str | None = None
        self._state = SimulatorState.RUNNING
        self._stop_event = threading.Event()

        self.experiment_id: str | None = None
        if self.logger is not None:
            self.experiment_id = self.logger.start_experiment(
                config=config.to_dict(),
                seed=int(config.seed),
                metadata={"weight_count": topology.total_weight_count()},
            )

        self._push_population()

    @property
    def state(self) -> SimulatorState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._state == SimulatorState.HALTED

    @property
    def best_fitness(self) -> float:
        return self.ga.best_fitness

    @property
    def average_fitness(self) -> float:
        return self.ga.average_fitness

    @property
    def ticks_remaining(self) -> int:
        return max(0, self.config.ticks_per_generation - self.tick_count)

    def tick(self) -> TickOutcome:
        """Advance the simulation by one tick or one epoch transition."""
        if self.halted:
            return TickOutcome.HALTED

        if self.tick_count < self.config.ticks_per_generation:
            if not self._step_sweepers():
                return TickOutcome.HALTED
            self.tick_count += 1
            return TickOutcome.STEPPED

        if not self._run_epoch():
            return TickOutcome.HALTED
        return TickOutcome.EPOCH

    def run_generation(self) -> GenerationStats | None:
        """Tick until the current generation's epoch completes.

        Returns the new statistics entry, or ``None`` if the simulation halted.
        """
        while True:
            outcome = self.tick()
            if outcome == TickOutcome.EPOCH:
                return self.statistics[-1]
            if outcome == TickOutcome.HALTED:
                return None

    def run(self, generations: int) -> None:
        """Run the simulation loop for a fixed number of generations."""
        if generations < 0:
            raise ValueError("generations must be non-negative")

        self._stop_event.clear()
        status = STATUS_COMPLETED
        for _ in range(generations):
            if self._stop_event.is_set():
                status = STATUS_STOPPED
                break
            if self.run_generation() is None:
                return

        if self.logger is not None and self.experiment_id is not None:
            self.logger.finish_experiment(self.experiment_id, status)

    def stop(self) -> None:
        """Ask ``run`` to stop before the next generation."""
        self._stop_event.set()

    def elite_threshold(self) -> int:
        """Minimum fitness for a sweeper to be highlighted as elite."""
        fitnesses = sorted((sweeper.fitness for sweeper in self.sweepers), reverse=True)
        if not fitnesses:
            return 0
        index = min(self.config.elite_count, len(fitnesses) - 1)
        return int(fitnesses[index]) + 1

    def render_state(self) -> RenderState:
        """Return a read-only snapshot of the current world."""
        threshold = self.elite_threshold()
        return RenderState(
            generation_index=self.generation,
            tick_index=self.tick_count,
            ticks_remaining=self.ticks_remaining,
            sweepers=[
                SweeperState(
                    index=index,
                    position=sweeper.position.as_tuple(),
                    rotation=float(sweeper.rotation),
                    fitness=int(sweeper.fitness),
                    elite=sweeper.fitness >= threshold,
                )
                for index, sweeper in enumerate(self.sweepers)
            ],
            arena=ArenaState(
                bounds=(self.arena.width, self.arena.height),
                targets=[target.as_tuple() for target in self.arena.targets],
            ),
            elite_threshold=threshold,
            best_fitness=float(self.best_fitness),
            average_fitness=float(self.average_fitness),
            halted=self.halted,
            error=self.error,
        )

    def set_arena_size(self, width: float, height: float) -> None:
        self.arena.set_bounds(width, height)

    def set_target_count(self, count: int) -> None:
        self.arena.resize_targets(count)

    def _step_sweepers(self) -> bool:
        # Every sweeper senses this tick's target positions; captures relocate
        # targets in the arena for the next tick only.
        targets = list(self.arena.targets)
        min_x, min_y, max_x, max_y = self.arena.bounds()
        capture_radius = self.config.target_capture_scale

        for index, sweeper in enumerate(self.sweepers):
            if not sweeper.sense_and_act(targets):
                self._halt(INPUT_MISMATCH_MESSAGE)
                return False

            sweeper.warp_to_bounds(min_x, min_y, max_x, max_y)

            hit = sweeper.check_capture(targets, capture_radius)
            if hit is not None:
                sweeper.increment_fitness()
                self.arena.relocate(hit)

            self.population[index].fitness = float(sweeper.fitness)
        return True

    def _run_epoch(self) -> bool:
        self.population = self.ga.epoch(self.population)

        stats = GenerationStats(
            generation=self.generation,
            best_fitness=float(self.ga.best_fitness),
            average_fitness=float(self.ga.average_fitness),
            worst_fitness=float(self.ga.worst_fitness),
        )
        self.statistics.append(stats)
        LOGGER.info(
            "Generation %d complete: best=%g average=%g",
            stats.generation,
            stats.best_fitness,
            stats.average_fitness,
        )
        self._record(stats)

        if not self._push_population():
            return False

        for sweeper in self.sweepers:
            sweeper.respawn()

        self.generation += 1
        self.tick_count = 0
        return True

    def _push_population(self) -> bool:
        if len(self.population) != len(self.sweepers):
            self._halt(
                f"Population size {len(self.population)} does not match {len(self.sweepers)} sweepers."
            )
            return False
        for sweeper, genome in zip(self.sweepers, self.population):
            try:
                sweeper.load_weights(genome.weights)
            except WeightCountError as exc:
                self._halt(f"Genome does not fit the network: {exc}")
                return False
        return True

    def _record(self, stats: GenerationStats) -> None:
        if self.logger is not None and self.experiment_id is not None:
            self.logger.log_generation(
                experiment_id=self.experiment_id,
                generation_index=stats.generation,
                best_fitness=stats.best_fitness,
                average_fitness=stats.average_fitness,
                worst_fitness=stats.worst_fitness,
            )
        if self.event_bus is not None:
            self.event_bus.publish(events.GENERATION_STATS, stats)

    def _halt(self, message: str) -> None:
        self.error = message
        self._state = SimulatorState.HALTED
        LOGGER.error("Simulation halted: %s", message)
        if self.logger is not None and self.experiment_id is not None:
            self.logger.finish_experiment(self.experiment_id, STATUS_HALTED, message)
        if self.event_bus is not None:
            self.event_bus.publish(events.HALTED, message)

    def genomes(self) -> list[Genome]:
        """Return copies of the genomes currently driving the sweepers."""
        return [genome.copy() for genome in self.population]

    def summary(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "tick": self.tick_count,
            "best_fitness": float(self.best_fitness),
            "average_fitness": float(self.average_fitness),
            "state": self._state.value,
            "error": self.error,
        }
