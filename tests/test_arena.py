"""Tests for arena target management."""

from __future__ import annotations

import random

import pytest

from core.vector2d import Vector2D
from environment.arena import Arena


def test_targets_start_inside_bounds() -> None:
    arena = Arena(width=400, height=300, target_count=40, rng=random.Random(1))

    assert len(arena) == 40
    assert arena.bounds() == (0.0, 0.0, 400.0, 300.0)
    assert all(0.0 <= t.x < 400.0 and 0.0 <= t.y < 300.0 for t in arena.targets)


def test_invalid_dimensions_rejected() -> None:
    with pytest.raises(ValueError):
        Arena(width=0, height=100, target_count=1, rng=random.Random(0))
    arena = Arena(width=10, height=10, target_count=1, rng=random.Random(0))
    with pytest.raises(ValueError):
        arena.set_bounds(10, -5)


def test_resize_targets_grows_and_truncates() -> None:
    arena = Arena(width=400, height=400, target_count=3, rng=random.Random(2))
    original = list(arena.targets)

    arena.resize_targets(5)
    assert len(arena) == 5
    assert arena.targets[:3] == original

    arena.resize_targets(2)
    assert arena.targets == original[:2]

    arena.resize_targets(0)
    assert arena.targets == []


def test_set_bounds_wraps_targets_into_new_area() -> None:
    arena = Arena(width=400, height=400, target_count=0, rng=random.Random(3))
    arena.targets = [Vector2D(350.0, 120.0), Vector2D(50.0, 250.0)]

    arena.set_bounds(300, 200)

    assert arena.targets[0].x == pytest.approx(50.0)
    assert arena.targets[0].y == pytest.approx(120.0)
    assert arena.targets[1].x == pytest.approx(50.0)
    assert arena.targets[1].y == pytest.approx(50.0)


def test_relocate_replaces_target_in_place() -> None:
    arena = Arena(width=400, height=400, target_count=3, rng=random.Random(4))
    before = list(arena.targets)

    moved = arena.relocate(1)

    assert arena.targets[1] == moved
    assert arena.targets[0] == before[0]
    assert arena.targets[2] == before[2]
    assert len(arena) == 3
