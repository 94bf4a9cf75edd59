"""Per-step position update for the defender and the adversary."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.noise import NoiseSource
from simulations.minmax_game.field_analysis import gradient_at

TARGETED_JUMP_PROBABILITY = 0.08
TARGETED_JUMP_FRACTION = 0.15


@dataclass(frozen=True)
class Position:
    """Agent location in grid-cell units."""

    x: float
    y: float

    def clamped(self, cols: int, rows: int) -> "Position":
        return Position(
            x=min(max(float(self.x), 0.0), float(cols - 1)),
            y=min(max(float(self.y), 0.0), float(rows - 1)),
        )

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(x=self.x + dx, y=self.y + dy)

    def to_list(self) -> list[float]:
        return [float(self.x), float(self.y)]


@dataclass(frozen=True)
class StepResult:
    """Outcome of one dynamics step, including the adversary's move budget."""

    defender: Position
    adversary: Position
    defender_displacement: tuple[float, float]
    adversary_displacement: tuple[float, float]
    targeted_jump: tuple[float, float]
    max_perturbation: float


def noise_levels(ratio: float) -> tuple[float, float]:
    """Return ``(defender, adversary)`` gradient noise for a strength ratio.

    A dominant adversary optimises with less variance while the
    disadvantaged defender gets noisier gradients.
    """
    if ratio > 1:
        return 0.08, 0.04
    return 0.05, 0.08


def max_perturbation(attack_strength: float, ratio: float) -> float:
    return 0.2 * attack_strength * (1.2 if ratio > 1 else 1.0)


class AgentDynamics:
    """Stateless step rule; all randomness comes from the injected noise."""

    def __init__(self, noise: NoiseSource) -> None:
        self.noise = noise

    def step(
        self,
        defender: Position,
        adversary: Position,
        grid: np.ndarray,
        defense_strength: float,
        attack_strength: float,
    ) -> StepResult:
        ratio = attack_strength / defense_strength
        defender_noise, adversary_noise = noise_levels(ratio)

        def_grad = gradient_at(grid, defender.x, defender.y, defender_noise, self.noise)
        adv_grad = gradient_at(grid, adversary.x, adversary.y, adversary_noise, self.noise)

        # Larger steps in flat regions; additive constants keep denominators positive.
        def_scale = 0.02 * defense_strength / (0.1 + def_grad.magnitude)
        if ratio > 1:
            adv_scale = 0.025 * attack_strength / (0.05 + adv_grad.magnitude)
        else:
            adv_scale = 0.02 * attack_strength / (0.1 + adv_grad.magnitude)

        def_dx = -def_grad.dx * def_scale
        def_dy = -def_grad.dy * def_scale
        adv_dx = adv_grad.dx * adv_scale
        adv_dy = adv_grad.dy * adv_scale

        budget = max_perturbation(attack_strength, ratio)
        adv_norm = math.hypot(adv_dx, adv_dy)
        if adv_norm > budget:
            shrink = budget / adv_norm
            adv_dx *= shrink
            adv_dy *= shrink

        jump = (0.0, 0.0)
        if ratio > 1 and self.noise.uniform() < TARGETED_JUMP_PROBABILITY:
            jump = self._targeted_jump(defender, adversary, budget)

        rows, cols = grid.shape
        new_defender = defender.offset(def_dx, def_dy).clamped(cols, rows)
        new_adversary = adversary.offset(adv_dx + jump[0], adv_dy + jump[1]).clamped(cols, rows)
        return StepResult(
            defender=new_defender,
            adversary=new_adversary,
            defender_displacement=(def_dx, def_dy),
            adversary_displacement=(adv_dx, adv_dy),
            targeted_jump=jump,
            max_perturbation=budget,
        )

    @staticmethod
    def _targeted_jump(defender: Position, adversary: Position, budget: float) -> tuple[float, float]:
        dir_x = defender.x - adversary.x
        dir_y = defender.y - adversary.y
        distance = math.hypot(dir_x, dir_y)
        if distance == 0:
            return (0.0, 0.0)
        length = TARGETED_JUMP_FRACTION * budget
        return (dir_x / distance * length, dir_y / distance * length)
