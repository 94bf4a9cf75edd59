"""Base simulation plugin contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.noise import NoiseSource


class Simulation(ABC):
    """Abstract simulation plugin interface.

    All simulation state must be instance-local. The core simulator talks to
    plugins only through this contract, and all randomness flows through the
    injected noise source.
    """

    def __init__(self, params: dict[str, Any], noise: NoiseSource) -> None:
        """Store plugin parameters and noise.

        Args:
            params: Plugin-specific validated parameters.
            noise: Seeded noise source owned by the simulator.
        """
        self.params = params
        self.noise = noise

    @abstractmethod
    def reset(self) -> None:
        """Build initial world state."""

    @abstractmethod
    def step(self) -> None:
        """Advance the simulation by one tick."""

    @abstractmethod
    def get_metrics(self) -> dict[str, float]:
        """Return scalar metrics for logging."""

    @abstractmethod
    def get_render_state(self) -> dict[str, Any]:
        """Return JSON-serializable world state (data only)."""

    def close(self) -> None:
        """Release plugin resources."""
        return None
