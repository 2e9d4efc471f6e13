"""Genome record evolved by the genetic algorithm."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from core.deterministic_rng import random_clamped


@dataclass
class Genome:
    """Flat network weight vector plus the fitness it earned.

    Fitness is written by the simulation driver; the genetic algorithm only
    reads it. ``copy()`` never shares the weight list.
    """

    weights: list[float] = field(default_factory=list)
    fitness: float = 0.0

    @classmethod
    def random(cls, length: int, rng: random.Random) -> "Genome":
        """Create a genome with weights in (-1, 1) and zero fitness."""
        return cls(weights=[random_clamped(rng) for _ in range(length)], fitness=0.0)

    @classmethod
    def zeros(cls, length: int) -> "Genome":
        """Default genome: all-zero weights, zero fitness."""
        return cls(weights=[0.0] * length, fitness=0.0)

    def copy(self) -> "Genome":
        return Genome(weights=list(self.weights), fitness=self.fitness)

    def __len__(self) -> int:
        return len(self.weights)


Population = list[Genome]
