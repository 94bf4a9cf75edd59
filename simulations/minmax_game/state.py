"""Explicit simulation state passed into and returned from the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

import numpy as np

from simulations.minmax_game.dynamics import Position, StepResult
from simulations.minmax_game.field_analysis import Contour, GradientVector
from simulations.minmax_game.loss_model import LossPair

POSITION_HISTORY_LIMIT = 50
LOSS_HISTORY_LIMIT = 100

T = TypeVar("T")


def append_bounded(items: tuple[T, ...], item: T, limit: int) -> tuple[T, ...]:
    """Append ``item`` and evict from the front until ``limit`` entries remain."""
    updated = items + (item,)
    if len(updated) > limit:
        updated = updated[len(updated) - limit:]
    return updated


@dataclass(frozen=True)
class LossHistory:
    defender: tuple[float, ...] = ()
    adversary: tuple[float, ...] = ()

    def appended(self, pair: LossPair, limit: int = LOSS_HISTORY_LIMIT) -> LossHistory:
        return LossHistory(
            defender=append_bounded(self.defender, pair.defender, limit),
            adversary=append_bounded(self.adversary, pair.adversary, limit),
        )


@dataclass(frozen=True, eq=False)
class SimulationState:
    """One consistent snapshot of a game session.

    Instances are never mutated; the engine returns a new state per call so a
    reader holding a reference always sees grid, positions, histories and
    iteration from the same moment.
    """

    grid: np.ndarray
    defender: Position
    adversary: Position
    iteration: int = 0
    defender_loss: float = 0.0
    adversary_loss: float = 0.0
    defender_history: tuple[Position, ...] = ()
    adversary_history: tuple[Position, ...] = ()
    loss_history: LossHistory = field(default_factory=LossHistory)
    contours: tuple[Contour, ...] = ()
    gradient_field: tuple[GradientVector, ...] = ()
    landscape_version: int = 1
    last_step: StepResult | None = None

    @property
    def rows(self) -> int:
        return int(self.grid.shape[0])

    @property
    def cols(self) -> int:
        return int(self.grid.shape[1])

    def to_dict(self, include_landscape: bool = True) -> dict[str, Any]:
        """Return a JSON-compatible view of the state."""
        payload: dict[str, Any] = {
            "iteration": int(self.iteration),
            "rows": self.rows,
            "cols": self.cols,
            "landscape_version": int(self.landscape_version),
            "defender": self.defender.to_list(),
            "adversary": self.adversary.to_list(),
            "defender_loss": float(self.defender_loss),
            "adversary_loss": float(self.adversary_loss),
            "defender_history": [p.to_list() for p in self.defender_history],
            "adversary_history": [p.to_list() for p in self.adversary_history],
            "loss_history": {
                "defender": [float(v) for v in self.loss_history.defender],
                "adversary": [float(v) for v in self.loss_history.adversary],
            },
        }
        if include_landscape:
            payload["grid"] = self.grid.tolist()
            payload["contours"] = [contour.to_dict() for contour in self.contours]
            payload["gradient_field"] = [vector.to_dict() for vector in self.gradient_field]
        return payload
