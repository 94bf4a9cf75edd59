"""Dynamic loss pair observed by both players at a given iteration."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.noise import NoiseSource
from simulations.minmax_game.dynamics import Position

INFLUENCE_RANGE = 0.3
DECAY_ITERATIONS = 500.0
MIN_LEARNING_FACTOR = 0.1
ADVANTAGE_RATE = 0.15
GAP_ONSET_ITERATION = 50


@dataclass(frozen=True)
class LossPair:
    defender: float
    adversary: float


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _cell(grid: np.ndarray, position: Position) -> float:
    rows, cols = grid.shape
    row = min(max(int(math.floor(position.y)), 0), rows - 1)
    col = min(max(int(math.floor(position.x)), 0), cols - 1)
    return float(grid[row, col])


class LossModel:
    """Blends landscape height, proximity, decay and strength advantage."""

    def __init__(self, noise: NoiseSource) -> None:
        self.noise = noise

    def dynamic_loss(
        self,
        grid: np.ndarray,
        defender: Position,
        adversary: Position,
        iteration: int,
        defense_strength: float = 5,
        attack_strength: float = 5,
    ) -> LossPair:
        rows, cols = grid.shape
        base_loss = _cell(grid, defender)
        adversary_cell = _cell(grid, adversary)

        distance = math.hypot((defender.x - adversary.x) / cols, (defender.y - adversary.y) / rows)
        learning_factor = max(MIN_LEARNING_FACTOR, 1.0 - iteration / DECAY_ITERATIONS)
        influence = max(0.0, 1.0 - distance / INFLUENCE_RANGE)
        oscillation = 0.1 * math.sin(iteration / 10)

        ratio = attack_strength / defense_strength
        advantage = max(0.0, ratio - 1) * ADVANTAGE_RATE

        defender_loss = learning_factor * (
            0.7 * base_loss + 0.2 * influence + oscillation + 0.03 * self.noise.standard_normal()
        )
        adversary_loss = learning_factor * (
            0.3 * adversary_cell
            + 0.4 * base_loss
            + 0.2 * influence
            + oscillation
            + 0.05 * self.noise.standard_normal()
        )

        if ratio > 1:
            defender_loss = min(defender_loss * (1 + advantage), 1.0)
            adversary_loss = max(adversary_loss * (1 - advantage), 0.0)
            if iteration > GAP_ONSET_ITERATION:
                growing_gap = min(0.3, (iteration - GAP_ONSET_ITERATION) / DECAY_ITERATIONS)
                defender_loss = min(defender_loss + growing_gap * math.sin(iteration / 30), 1.0)

        return LossPair(defender=_clamp01(defender_loss), adversary=_clamp01(adversary_loss))
