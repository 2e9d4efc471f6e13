"""Sweeper agent: senses the nearest target and drives two tracks."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Sequence

from core.vector2d import Vector2D
from network.neural_net import NetworkTopology, NeuralNetwork

# Added to the capture radius when testing for a target hit.
CAPTURE_MARGIN = 5.0

INITIAL_TRACK_OUTPUT = 0.16


@dataclass
class Sweeper:
    """Single agent state plus its exclusively owned neural network.

    Sensors fed to the brain each tick:
    - unit vector from the sweeper to the nearest target (x, y)
    - the sweeper's current heading (x, y)

    The first two brain outputs drive the left and right tracks. Their
    difference turns the sweeper, their sum moves it forward.
    """

    brain: NeuralNetwork
    max_turn_rate: float
    position: Vector2D = field(default_factory=Vector2D)
    rotation: float = 0.0
    heading: Vector2D = field(default_factory=Vector2D)
    left_track: float = INITIAL_TRACK_OUTPUT
    right_track: float = INITIAL_TRACK_OUTPUT
    speed: float = 0.0
    fitness: int = 0
    nearest_target_index: int | None = None

    @classmethod
    def spawn(
        cls,
        topology: NetworkTopology,
        max_turn_rate: float,
        bounds: tuple[float, float],
        rng: random.Random,
    ) -> "Sweeper":
        """Create a sweeper at a random arena position and rotation."""
        width, height = bounds
        rotation = rng.random() * 2.0 * math.pi
        return cls(
            brain=NeuralNetwork(topology, rng=rng),
            max_turn_rate=float(max_turn_rate),
            position=Vector2D(rng.random() * width, rng.random() * height),
            rotation=rotation,
            heading=Vector2D(-math.sin(rotation), math.cos(rotation)),
        )

    @property
    def weight_count(self) -> int:
        return self.brain.total_weight_count()

    def load_weights(self, weights: Sequence[float]) -> None:
        self.brain.load_weights(weights)

    def nearest_target(self, targets: Sequence[Vector2D]) -> Vector2D:
        """Return the vector from this sweeper to the closest target.

        Caches the target index for ``check_capture``. With no targets the
        cached index is cleared and the zero vector is returned.
        """
        self.nearest_target_index = None
        closest_so_far = math.inf
        offset = Vector2D(0.0, 0.0)

        for index, target in enumerate(targets):
            to_target = target - self.position
            distance = to_target.length()
            if distance < closest_so_far:
                closest_so_far = distance
                offset = to_target
                self.nearest_target_index = index

        return offset

    def sense_and_act(self, targets: Sequence[Vector2D]) -> bool:
        """Run one sensor/brain/motion step.

        Returns:
            bool: ``False`` when the brain produced fewer outputs than its
                topology declares (input width mismatch). The caller must
                treat this as fatal.
        """
        to_target = self.nearest_target(targets).normalized()
        sensors = [to_target.x, to_target.y, self.heading.x, self.heading.y]

        outputs = self.brain.compute_outputs(sensors)
        if len(outputs) < max(self.brain.num_outputs, 2):
            return False

        self.left_track = outputs[0]
        self.right_track = outputs[1]

        rotation_force = self.left_track - self.right_track
        rotation_force = max(-self.max_turn_rate, min(self.max_turn_rate, rotation_force))
        self.rotation += rotation_force

        # Uncapped: the configured max speed is not applied here.
        self.speed = self.left_track + self.right_track

        self.heading = Vector2D(-math.sin(self.rotation), math.cos(self.rotation))
        self.position = self.position + self.heading * self.speed
        return True

    def check_capture(self, targets: Sequence[Vector2D], capture_radius: float) -> int | None:
        """Return the cached nearest-target index if it is within reach."""
        index = self.nearest_target_index
        if index is None or not 0 <= index < len(targets):
            return None
        if self.position.distance_to(targets[index]) < capture_radius + CAPTURE_MARGIN:
            return index
        return None

    def warp_to_bounds(self, min_x: float, min_y: float, max_x: float, max_y: float) -> None:
        """Wrap an out-of-bounds coordinate to the opposite edge, per axis."""
        x, y = self.position.x, self.position.y
        if x > max_x:
            x = min_x
        if x < min_x:
            x = max_x
        if y > max_y:
            y = min_y
        if y < min_y:
            y = max_y
        self.position = Vector2D(x, y)

    def increment_fitness(self) -> None:
        self.fitness += 1

    def respawn(self) -> None:
        """Start a new generation: clear rotation and fitness only."""
        self.rotation = 0.0
        self.fitness = 0
