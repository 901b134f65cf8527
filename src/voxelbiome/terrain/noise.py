"""Seeded pseudorandom streams and 2D noise.

Every generation call builds its streams fresh from a seed string, so the
output of a generator is a pure function of its seed. The string is fed to
``random.Random`` directly, which hashes it the same way on every run.

A noise field is constructed from a stream (it consumes one draw for its
own seed), the same way the terrain and its features derive their noise.
"""

import random
from typing import Sequence, TypeVar

from opensimplex import OpenSimplex

T = TypeVar("T")


class Noise2D:
    """A continuous 2D simplex noise field in roughly [-1, 1]."""

    def __init__(self, seed: int):
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)

    def __call__(self, x: float, z: float) -> float:
        return self._simplex.noise2(x, z)


class RandomStream:
    """A deterministic pseudorandom stream derived from a seed string."""

    def __init__(self, seed: str):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        """Get the next float in [0, 1)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Get an integer in [a, b], both inclusive."""
        return a + int(self._rng.random() * (b - a + 1))

    def uniform(self, a: float, b: float) -> float:
        """Get a float in [a, b)."""
        return a + self._rng.random() * (b - a)

    def choice(self, seq: Sequence[T]) -> T:
        return seq[int(self._rng.random() * len(seq))]

    def noise2d(self) -> Noise2D:
        """Create a noise field seeded from this stream."""
        return Noise2D(self._rng.getrandbits(32))


def derive_stream(seed: str, suffix: str = "") -> RandomStream:
    """Create the stream for a seed, optionally scoped to a sub-feature.

    Args:
        seed: Scoped seed string
        suffix: Fixed suffix naming the sub-feature (e.g. "trees")

    Returns:
        A fresh RandomStream
    """
    return RandomStream(seed + suffix)


def normalized_noise(noise: Noise2D, x: float, z: float, scale: float, amplitude: float) -> float:
    """Sample noise at x,z and map it from [-1, 1] to [0, amplitude]."""
    return (noise(x / scale, z / scale) + 1) / 2 * amplitude
