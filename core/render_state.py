"""Immutable render-state snapshots handed to the host each tick."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SweeperState:
    """Render snapshot for one sweeper."""

    index: int
    position: tuple[float, float]
    rotation: float
    fitness: int
    elite: bool = False


@dataclass(frozen=True)
class ArenaState:
    """Render snapshot of the arena bounds and target positions."""

    bounds: tuple[float, float]
    targets: list[tuple[float, float]] = field(default_factory=list)


@dataclass(frozen=True)
class RenderState:
    """Top-level immutable frame exposed by the simulator.

    ``ticks_remaining`` is the number of ticks left before the next epoch.
    ``elite_threshold`` is the minimum fitness for a sweeper to be drawn as
    elite.
    """

    generation_index: int
    tick_index: int
    ticks_remaining: int
    sweepers: list[SweeperState]
    arena: ArenaState
    elite_threshold: int
    best_fitness: float
    average_fitness: float
    halted: bool = False
    error: str | None = None

    def info_text(self) -> str:
        """Return the status text block drawn in the scene corner."""
        if self.halted:
            return f"ERROR: {self.error}"
        return (
            f"Generation: {self.generation_index} [TTL: {self.ticks_remaining}]\n"
            f"Fitness: best: {self.best_fitness:g}, avge: {self.average_fitness:g}\n"
            f"Elite threshold: {self.elite_threshold}\n"
        )
