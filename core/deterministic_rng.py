"""Deterministic RNG container handing out named, independent streams."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass

from core.noise import NoiseSource


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state."""

    seed: int

    def __post_init__(self) -> None:
        self._streams: dict[str, random.Random] = {}

    def stream(self, name: str) -> random.Random:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            # Use stable cross-process seed derivation instead of built-in hash().
            digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
            derived_seed = int.from_bytes(digest[:8], byteorder="big", signed=False) & 0xFFFFFFFF
            self._streams[name] = random.Random(derived_seed)
        return self._streams[name]

    def noise(self, name: str) -> NoiseSource:
        """Return a noise source backed by the named stream."""
        return NoiseSource(self.stream(name))
