"""Seeded random sources for reproducible simulation runs."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field

TARGETS_STREAM = "targets"
SWEEPERS_STREAM = "sweepers"
EVOLUTION_STREAM = "evolution"


def random_clamped(rng: random.Random) -> float:
    """Return a random float in the open range (-1, 1).

    Difference of two uniform draws, so values cluster around zero.
    """
    return rng.random() - rng.random()


def derive_seed(seed: int, name: str) -> int:
    """Stable 32-bit seed for stream ``name``; independent of ``PYTHONHASHSEED``."""
    digest = hashlib.sha256(f"{seed}:{name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:4], byteorder="big", signed=False)


@dataclass
class DeterministicRNG:
    """Named ``random.Random`` streams derived from one run seed.

    Target placement, sweeper spawning and reproduction each draw from their
    own stream, so sampling more often in one of them leaves the others
    unchanged. The global ``random`` module is never touched.
    """

    seed: int
    _streams: dict[str, random.Random] = field(default_factory=dict, init=False, repr=False)

    def stream(self, name: str) -> random.Random:
        rng = self._streams.get(name)
        if rng is None:
            rng = self._streams[name] = random.Random(derive_seed(self.seed, name))
        return rng

    def stream_names(self) -> list[str]:
        return sorted(self._streams)
