"""Simulation plugin for minmax_game."""

from __future__ import annotations

import math
from typing import Any

from core.noise import NoiseSource
from simulations.base_simulation import Simulation
from simulations.minmax_game.engine import GameConfig, GameEngine
from simulations.minmax_game.state import SimulationState


class MinMaxGameSimulation(Simulation):
    """Defender and adversary playing gradient descent/ascent on a landscape."""

    def __init__(self, params: dict[str, Any], noise: NoiseSource) -> None:
        super().__init__(params=params, noise=noise)
        self.game_config = GameConfig(
            canvas_width=int(params.get("canvas_width", 800)),
            canvas_height=int(params.get("canvas_height", 600)),
            resolution=int(params.get("resolution", 5)),
            defense_strength=int(params.get("defense_strength", 5)),
            attack_strength=int(params.get("attack_strength", 5)),
            contour_levels=int(params.get("contour_levels", 15)),
            gradient_spacing=int(params.get("gradient_spacing", 20)),
            smoothing_iterations=int(params.get("smoothing_iterations", 1)),
            smoothing_temperature=float(params.get("smoothing_temperature", 0.2)),
            landscape_noise=float(params.get("landscape_noise", 0.08)),
            landscape_jitter=float(params.get("landscape_jitter", 0.02)),
            defender_start_x=float(params.get("defender_start_x", 0.3)),
            defender_start_y=float(params.get("defender_start_y", 0.7)),
            adversary_start_x=float(params.get("adversary_start_x", 0.7)),
            adversary_start_y=float(params.get("adversary_start_y", 0.3)),
            position_history_limit=int(params.get("position_history_limit", 50)),
            loss_history_limit=int(params.get("loss_history_limit", 100)),
        )
        self.animation_speed = int(params.get("animation_speed", 5))
        self.defense_strength = self.game_config.defense_strength
        self.attack_strength = self.game_config.attack_strength
        self.engine = GameEngine(config=self.game_config, noise=noise)
        self.state: SimulationState | None = None

    def reset(self) -> None:
        self.state = self.engine.initialize(
            defense_strength=self.defense_strength,
            attack_strength=self.attack_strength,
        )

    def step(self) -> None:
        self.state = self.engine.advance(self._require_state(), self.defense_strength, self.attack_strength)

    def regenerate(self, width: int, height: int) -> SimulationState:
        """Swap in a new landscape for a resized canvas, resetting the session."""
        if self.state is None:
            self.state = self.engine.initialize(width, height, self.defense_strength, self.attack_strength)
        else:
            self.state = self.engine.regenerate(
                self.state, width, height, self.defense_strength, self.attack_strength
            )
        return self.state

    def set_strengths(self, defense_strength: int, attack_strength: int) -> None:
        """Update both strengths; the loss pair is re-evaluated immediately."""
        self.defense_strength = int(defense_strength)
        self.attack_strength = int(attack_strength)
        if self.state is not None:
            self.state = self.engine.rescore(self.state, self.defense_strength, self.attack_strength)

    def get_metrics(self) -> dict[str, float]:
        state = self._require_state()
        metrics = {
            "iteration": float(state.iteration),
            "defender_loss": float(state.defender_loss),
            "adversary_loss": float(state.adversary_loss),
            "loss_gap": float(state.defender_loss - state.adversary_loss),
            "defender_x": float(state.defender.x),
            "defender_y": float(state.defender.y),
            "adversary_x": float(state.adversary.x),
            "adversary_y": float(state.adversary.y),
            "agent_distance": math.hypot(
                state.defender.x - state.adversary.x, state.defender.y - state.adversary.y
            ),
            "strength_ratio": float(self.attack_strength) / float(self.defense_strength),
            "landscape_version": float(state.landscape_version),
            "step_count": float(state.iteration),
        }
        if state.last_step is not None:
            dx, dy = state.last_step.adversary_displacement
            metrics["adversary_step_norm"] = math.hypot(dx, dy)
            metrics["max_perturbation"] = float(state.last_step.max_perturbation)
        return metrics

    def get_render_state(self) -> dict[str, Any]:
        state = self._require_state()
        payload = state.to_dict(include_landscape=True)
        payload.update(
            {
                "simulation": SIMULATION_NAME,
                "step": int(state.iteration),
                "resolution": int(self.game_config.resolution),
                "defense_strength": int(self.defense_strength),
                "attack_strength": int(self.attack_strength),
                "animation_speed": int(self.animation_speed),
            }
        )
        return payload

    def close(self) -> None:
        self.state = None

    def _require_state(self) -> SimulationState:
        if self.state is None:
            raise RuntimeError("minmax_game has no state; call reset() first.")
        return self.state


SIMULATION_NAME = "minmax_game"
SimulationClass = MinMaxGameSimulation
