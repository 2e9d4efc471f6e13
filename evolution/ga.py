"""Genetic algorithm over real-valued weight vectors."""

from __future__ import annotations

import math
import random
from typing import Sequence

from agents.genome import Genome, Population
from core.deterministic_rng import random_clamped


class GeneticAlgorithm:
    """Elitism + roulette-wheel selection + single-point crossover + mutation.

    The algorithm owns a working copy of the population. ``epoch`` consumes a
    fitness-scored population and returns the next generation; it never
    writes fitness values itself (offspring start at zero).
    """

    def __init__(
        self,
        population_size: int,
        chromosome_length: int,
        crossover_rate: float = 0.7,
        mutation_rate: float = 0.1,
        max_perturbation: float = 0.3,
        elite_count: int = 4,
        elite_copies: int = 1,
        rng: random.Random | None = None,
    ) -> None:
        if population_size <= 0:
            raise ValueError("population_size must be > 0")
        if chromosome_length <= 0:
            raise ValueError("chromosome_length must be > 0")

        self.population_size = int(population_size)
        self.chromosome_length = int(chromosome_length)
        self.crossover_rate = float(crossover_rate)
        self.mutation_rate = float(mutation_rate)
        self.max_perturbation = float(max_perturbation)
        self.elite_count = max(0, int(elite_count))
        self.elite_copies = max(0, int(elite_copies))
        self.rng = rng or random.Random(0)

        self.generation = 0
        self.total_fitness = 0.0
        self.best_fitness = 0.0
        self.worst_fitness = math.inf
        self.average_fitness = 0.0

        self.population: Population = [
            Genome.random(self.chromosome_length, self.rng) for _ in range(self.population_size)
        ]

    @property
    def chromosomes(self) -> Population:
        """Return copies of the current working population."""
        return [genome.copy() for genome in self.population]

    def epoch(self, scored_population: Sequence[Genome]) -> Population:
        """Run one generation and return the new population.

        Args:
            scored_population: Genomes with fitness filled in by the driver.

        Returns:
            Population: Exactly ``population_size`` genomes. Elite copies come
                first, fittest first, followed by bred offspring.
        """
        if len(scored_population) != self.population_size:
            raise ValueError(
                f"Expected population of {self.population_size}, got {len(scored_population)}."
            )

        self.population = [genome.copy() for genome in scored_population]
        self._reset()

        self.population.sort(key=lambda genome: genome.fitness)
        self._calculate_best_worst_average_total()

        new_population: Population = []

        # An odd number of elite slots would leave pairwise breeding one short.
        if (self.elite_count * self.elite_copies) % 2 == 0:
            self._grab_n_best(self.elite_count, self.elite_copies, new_population)

        while len(new_population) < self.population_size:
            mum = self._select_roulette()
            dad = self._select_roulette()

            baby_1, baby_2 = self._crossover(mum.weights, dad.weights)

            self._mutate(baby_1)
            self._mutate(baby_2)

            new_population.append(Genome(weights=baby_1, fitness=0.0))
            new_population.append(Genome(weights=baby_2, fitness=0.0))

        # Odd population sizes overshoot by one child.
        del new_population[self.population_size:]

        self.population = new_population
        self.generation += 1
        return self.chromosomes

    def _reset(self) -> None:
        self.total_fitness = 0.0
        self.best_fitness = 0.0
        self.worst_fitness = math.inf
        self.average_fitness = 0.0

    def _calculate_best_worst_average_total(self) -> None:
        highest_so_far = 0.0
        lowest_so_far = math.inf
        total = 0.0

        for genome in self.population:
            if genome.fitness > highest_so_far:
                highest_so_far = genome.fitness
                self.best_fitness = highest_so_far
            if genome.fitness < lowest_so_far:
                lowest_so_far = genome.fitness
                self.worst_fitness = lowest_so_far
            total += genome.fitness

        self.total_fitness = total
        self.average_fitness = total / self.population_size

    def _grab_n_best(self, n_best: int, num_copies: int, target: Population) -> None:
        """Append ``num_copies`` of each of the ``n_best`` fittest genomes."""
        n_best = min(n_best, len(self.population))
        for rank in range(n_best):
            elite = self.population[len(self.population) - 1 - rank]
            for _ in range(num_copies):
                target.append(elite.copy())

    def _select_roulette(self) -> Genome:
        """Fitness-proportional pick from the sorted working population.

        With zero total fitness there is no wheel to spin; the all-zero
        default genome is returned instead.
        """
        if self.total_fitness <= 0:
            return Genome.zeros(self.chromosome_length)

        threshold = self.rng.random() * self.total_fitness
        fitness_so_far = 0.0
        for genome in self.population:
            fitness_so_far += genome.fitness
            if fitness_so_far >= threshold:
                return genome.copy()

        # Float rounding can leave the running sum just below the threshold.
        return self.population[-1].copy()

    def _crossover(self, mum: Sequence[float], dad: Sequence[float]) -> tuple[list[float], list[float]]:
        if self.rng.random() >= self.crossover_rate or list(mum) == list(dad):
            return list(mum), list(dad)

        crossover_point = self.rng.randint(0, self.chromosome_length - 1)
        baby_1 = list(mum[:crossover_point]) + list(dad[crossover_point:])
        baby_2 = list(dad[:crossover_point]) + list(mum[crossover_point:])
        return baby_1, baby_2

    def _mutate(self, chromosome: list[float]) -> None:
        for index in range(len(chromosome)):
            if self.rng.random() < self.mutation_rate:
                chromosome[index] += random_clamped(self.rng) * self.max_perturbation
