"""Injectable noise capability for stochastic simulation components."""

from __future__ import annotations

import math
import random


class NoiseSource:
    """Standard-normal and uniform deviates drawn from an owned RNG.

    Components receive a ``NoiseSource`` explicitly instead of reaching for
    module-level ``random`` so runs can be reproduced from a seed.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def uniform(self) -> float:
        """Return a uniform deviate in [0, 1)."""
        return self.rng.random()

    def standard_normal(self) -> float:
        """Return one N(0, 1) sample via the Box-Muller transform."""
        # 1 - random() lies in (0, 1], keeping log() finite.
        u1 = 1.0 - self.rng.random()
        u2 = self.rng.random()
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
