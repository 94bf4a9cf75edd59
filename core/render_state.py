"""Immutable render-state contracts for visualization consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AgentState:
    """Simulation-agnostic agent snapshot."""

    id: str
    position: tuple[float, float]
    trail: tuple[tuple[float, float], ...] = ()
    loss: float | None = None
    loss_history: tuple[float, ...] = ()


@dataclass(frozen=True)
class EnvironmentState:
    """Simulation-agnostic environment snapshot.

    ``scalar_field`` holds the scalar grid (rows x cols) when the simulation has one;
    ``overlays`` carries derived layers such as contours or vector fields.
    """

    bounds: tuple[int, int]
    cell_size: int = 1
    scalar_field: Any = None
    overlays: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderState:
    """Top-level immutable render frame emitted by simulator."""

    step_index: int
    agents: list[AgentState]
    environment: EnvironmentState
    metrics: dict[str, float]
    timestamp: float

    def agent(self, agent_id: str) -> AgentState:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        raise KeyError(f"Unknown agent id: {agent_id}")
