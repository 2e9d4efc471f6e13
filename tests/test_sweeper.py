"""Tests for sweeper sensing, steering, wrapping, and capture."""

from __future__ import annotations

import math
import random

import pytest

from agents.sweeper import INITIAL_TRACK_OUTPUT, Sweeper
from core.vector2d import Vector2D
from network.neural_net import NetworkTopology, NeuralNetwork


def _sweeper(x: float = 100.0, y: float = 100.0, topology: NetworkTopology | None = None) -> Sweeper:
    return Sweeper(
        brain=NeuralNetwork(topology or NetworkTopology()),
        max_turn_rate=0.3,
        position=Vector2D(x, y),
        rotation=0.0,
        heading=Vector2D(0.0, 1.0),
    )


def test_nearest_target_returns_offset_and_caches_index() -> None:
    sweeper = _sweeper()
    targets = [Vector2D(300.0, 300.0), Vector2D(103.0, 104.0), Vector2D(0.0, 0.0)]

    offset = sweeper.nearest_target(targets)

    assert offset == Vector2D(3.0, 4.0)
    assert sweeper.nearest_target_index == 1


def test_nearest_target_with_no_targets() -> None:
    sweeper = _sweeper()
    sweeper.nearest_target_index = 3

    assert sweeper.nearest_target([]) == Vector2D(0.0, 0.0)
    assert sweeper.nearest_target_index is None
    assert sweeper.check_capture([], 2.0) is None


def test_zero_weight_brain_moves_straight_ahead() -> None:
    sweeper = _sweeper()

    assert sweeper.sense_and_act([Vector2D(50.0, 50.0)]) is True

    # both tracks 0.5: no turn, speed 1 along heading (0, 1)
    assert sweeper.left_track == 0.5
    assert sweeper.right_track == 0.5
    assert sweeper.rotation == 0.0
    assert sweeper.speed == 1.0
    assert sweeper.position.x == pytest.approx(100.0)
    assert sweeper.position.y == pytest.approx(101.0)


def test_sense_and_act_without_targets_still_moves() -> None:
    sweeper = _sweeper()

    assert sweeper.sense_and_act([]) is True
    assert sweeper.position.y == pytest.approx(101.0)


def test_sweeper_on_top_of_target_senses_zero_direction(monkeypatch) -> None:
    sweeper = _sweeper()
    seen: list[list[float]] = []
    compute = sweeper.brain.compute_outputs

    def record(inputs):
        seen.append(list(inputs))
        return compute(inputs)

    monkeypatch.setattr(sweeper.brain, "compute_outputs", record)

    assert sweeper.sense_and_act([Vector2D(100.0, 100.0)]) is True

    sensors = seen[0]
    assert len(sensors) == 4
    assert all(math.isfinite(value) for value in sensors)
    assert sensors[:2] == [0.0, 0.0]
    assert sensors[2:] == [0.0, 1.0]
    assert all(math.isfinite(value) for value in sweeper.position.as_tuple())


def test_turn_is_clamped_to_max_turn_rate() -> None:
    topology = NetworkTopology(num_hidden_layers=0)
    sweeper = _sweeper(topology=topology)
    # left track saturates at 1, right track at 0
    sweeper.load_weights([0.0, 0.0, 0.0, 0.0, -100.0, 0.0, 0.0, 0.0, 0.0, 100.0])

    assert sweeper.sense_and_act([Vector2D(0.0, 0.0)]) is True

    assert sweeper.rotation == pytest.approx(0.3)
    assert sweeper.heading.x == pytest.approx(-math.sin(0.3))
    assert sweeper.heading.y == pytest.approx(math.cos(0.3))


def test_speed_is_not_capped() -> None:
    topology = NetworkTopology(num_hidden_layers=0)
    sweeper = _sweeper(topology=topology)
    sweeper.load_weights([0.0, 0.0, 0.0, 0.0, -100.0, 0.0, 0.0, 0.0, 0.0, -100.0])

    sweeper.sense_and_act([Vector2D(0.0, 0.0)])

    assert sweeper.speed == pytest.approx(2.0)
    assert sweeper.rotation == pytest.approx(0.0)


def test_input_mismatch_reports_failure() -> None:
    sweeper = _sweeper(topology=NetworkTopology(num_inputs=3))
    start = sweeper.position

    assert sweeper.sense_and_act([Vector2D(0.0, 0.0)]) is False
    assert sweeper.position == start
    assert sweeper.left_track == INITIAL_TRACK_OUTPUT


@pytest.mark.parametrize(
    ("start", "expected"),
    [
        (Vector2D(401.0, 200.0), Vector2D(0.0, 200.0)),
        (Vector2D(-1.0, 200.0), Vector2D(400.0, 200.0)),
        (Vector2D(200.0, 400.5), Vector2D(200.0, 0.0)),
        (Vector2D(200.0, -0.5), Vector2D(200.0, 400.0)),
        (Vector2D(400.0, 0.0), Vector2D(400.0, 0.0)),
    ],
)
def test_warp_to_bounds(start: Vector2D, expected: Vector2D) -> None:
    sweeper = _sweeper(start.x, start.y)

    sweeper.warp_to_bounds(0.0, 0.0, 400.0, 400.0)

    assert sweeper.position == expected


def test_capture_uses_radius_plus_margin() -> None:
    sweeper = _sweeper()
    near = [Vector2D(106.0, 100.0)]
    far = [Vector2D(108.0, 100.0)]

    sweeper.nearest_target(near)
    assert sweeper.check_capture(near, 2.0) == 0

    sweeper.nearest_target(far)
    assert sweeper.check_capture(far, 2.0) is None


def test_capture_ignores_stale_index() -> None:
    sweeper = _sweeper()
    sweeper.nearest_target_index = 5

    assert sweeper.check_capture([Vector2D(100.0, 100.0)], 2.0) is None


def test_respawn_resets_rotation_and_fitness_only() -> None:
    sweeper = _sweeper(250.0, 75.0)
    sweeper.rotation = 1.2
    sweeper.increment_fitness()
    sweeper.increment_fitness()
    assert sweeper.fitness == 2

    sweeper.respawn()

    assert sweeper.rotation == 0.0
    assert sweeper.fitness == 0
    assert sweeper.position == Vector2D(250.0, 75.0)


def test_spawn_places_sweeper_inside_bounds() -> None:
    rng = random.Random(4)
    topology = NetworkTopology()

    for _ in range(20):
        sweeper = Sweeper.spawn(topology, max_turn_rate=0.3, bounds=(400.0, 300.0), rng=rng)
        assert 0.0 <= sweeper.position.x < 400.0
        assert 0.0 <= sweeper.position.y < 300.0
        assert 0.0 <= sweeper.rotation < 2.0 * math.pi
        assert sweeper.heading.length() == pytest.approx(1.0)
        assert sweeper.fitness == 0
        assert sweeper.weight_count == 44
