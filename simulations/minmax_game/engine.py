"""Stateless game engine: builds and advances ``SimulationState`` values."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from core.noise import NoiseSource
from simulations.minmax_game.dynamics import AgentDynamics, Position
from simulations.minmax_game.field_analysis import contours, gradient_field
from simulations.minmax_game.landscape import LandscapeGenerator
from simulations.minmax_game.loss_model import LossModel
from simulations.minmax_game.state import (
    LOSS_HISTORY_LIMIT,
    POSITION_HISTORY_LIMIT,
    SimulationState,
    append_bounded,
)


@dataclass(frozen=True)
class GameConfig:
    """Runtime parameters for the min-max game."""

    canvas_width: int = 800
    canvas_height: int = 600
    resolution: int = 5
    defense_strength: int = 5
    attack_strength: int = 5
    contour_levels: int = 15
    gradient_spacing: int = 20
    smoothing_iterations: int = 1
    smoothing_temperature: float = 0.2
    landscape_noise: float = 0.08
    landscape_jitter: float = 0.02
    defender_start_x: float = 0.3
    defender_start_y: float = 0.7
    adversary_start_x: float = 0.7
    adversary_start_y: float = 0.3
    position_history_limit: int = POSITION_HISTORY_LIMIT
    loss_history_limit: int = LOSS_HISTORY_LIMIT


class GameEngine:
    """Owns the landscape, dynamics and loss components but no session state.

    One engine may serve several independent sessions; every call takes the
    current state and returns a new one.
    """

    def __init__(self, config: GameConfig, noise: NoiseSource) -> None:
        self.config = config
        self.noise = noise
        self.landscape = LandscapeGenerator(
            noise=noise,
            noise_scale=config.landscape_noise,
            jitter_scale=config.landscape_jitter,
            smoothing_iterations=config.smoothing_iterations,
            temperature=config.smoothing_temperature,
        )
        self.dynamics = AgentDynamics(noise)
        self.loss_model = LossModel(noise)

    def initialize(
        self,
        width: int | None = None,
        height: int | None = None,
        defense_strength: int | None = None,
        attack_strength: int | None = None,
        landscape_version: int = 1,
    ) -> SimulationState:
        """Generate a fresh landscape and place both agents at their starts.

        Raises ``InvalidDimension`` when the canvas is too small; no state is
        produced in that case.
        """
        width = self.config.canvas_width if width is None else width
        height = self.config.canvas_height if height is None else height
        grid = self.landscape.generate(width, height, self.config.resolution)
        rows, cols = grid.shape
        config = self.config
        # On a 3x3 grid 0.7 * 3 already lies past the last cell.
        defender = Position(cols * config.defender_start_x, rows * config.defender_start_y).clamped(cols, rows)
        adversary = Position(cols * config.adversary_start_x, rows * config.adversary_start_y).clamped(cols, rows)
        state = SimulationState(
            grid=grid,
            defender=defender,
            adversary=adversary,
            contours=tuple(contours(grid, self.config.contour_levels)),
            gradient_field=tuple(gradient_field(grid, self.config.gradient_spacing)),
            landscape_version=int(landscape_version),
        )
        return self.rescore(state, defense_strength, attack_strength)

    def regenerate(
        self,
        state: SimulationState,
        width: int,
        height: int,
        defense_strength: int | None = None,
        attack_strength: int | None = None,
    ) -> SimulationState:
        """Replace grid, positions, histories and iteration in one new state."""
        return self.initialize(
            width,
            height,
            defense_strength,
            attack_strength,
            landscape_version=state.landscape_version + 1,
        )

    def advance(
        self,
        state: SimulationState,
        defense_strength: int | None = None,
        attack_strength: int | None = None,
    ) -> SimulationState:
        """Move both agents one step and score the new positions."""
        defense, attack = self._strengths(defense_strength, attack_strength)
        result = self.dynamics.step(state.defender, state.adversary, state.grid, defense, attack)
        limit = self.config.position_history_limit
        moved = dataclasses.replace(
            state,
            defender=result.defender,
            adversary=result.adversary,
            defender_history=append_bounded(state.defender_history, result.defender, limit),
            adversary_history=append_bounded(state.adversary_history, result.adversary, limit),
            iteration=state.iteration + 1,
            last_step=result,
        )
        return self.rescore(moved, defense, attack)

    def rescore(
        self,
        state: SimulationState,
        defense_strength: int | None = None,
        attack_strength: int | None = None,
    ) -> SimulationState:
        """Recompute the loss pair at the current positions and record it."""
        defense, attack = self._strengths(defense_strength, attack_strength)
        pair = self.loss_model.dynamic_loss(
            state.grid, state.defender, state.adversary, state.iteration, defense, attack
        )
        return dataclasses.replace(
            state,
            defender_loss=pair.defender,
            adversary_loss=pair.adversary,
            loss_history=state.loss_history.appended(pair, self.config.loss_history_limit),
        )

    def _strengths(self, defense: int | None, attack: int | None) -> tuple[int, int]:
        return (
            self.config.defense_strength if defense is None else defense,
            self.config.attack_strength if attack is None else attack,
        )
