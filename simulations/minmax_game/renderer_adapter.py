"""Render adapter for minmax_game plugin."""

from __future__ import annotations

import time

from core.render_state import AgentState, EnvironmentState, RenderState


def _trail(history: tuple) -> tuple[tuple[float, float], ...]:
    return tuple((float(p.x), float(p.y)) for p in history)


def build_render_state(simulator: object) -> RenderState:
    """Build a RenderState from the plugin's current SimulationState."""
    sim = getattr(simulator, "sim")
    state = sim.state
    if state is None:
        raise RuntimeError("minmax_game has no state to render; call reset() first.")
    metrics = sim.get_metrics()

    agents = [
        AgentState(
            id="defender",
            position=(float(state.defender.x), float(state.defender.y)),
            trail=_trail(state.defender_history),
            loss=float(state.defender_loss),
            loss_history=tuple(state.loss_history.defender),
        ),
        AgentState(
            id="adversary",
            position=(float(state.adversary.x), float(state.adversary.y)),
            trail=_trail(state.adversary_history),
            loss=float(state.adversary_loss),
            loss_history=tuple(state.loss_history.adversary),
        ),
    ]

    environment = EnvironmentState(
        bounds=(state.cols, state.rows),
        cell_size=int(sim.game_config.resolution),
        scalar_field=state.grid,
        overlays={
            "contours": state.contours,
            "gradient_field": state.gradient_field,
        },
        version=int(state.landscape_version),
        metadata={
            "simulation": "minmax_game",
            "defense_strength": int(sim.defense_strength),
            "attack_strength": int(sim.attack_strength),
        },
    )

    return RenderState(
        step_index=int(state.iteration),
        agents=agents,
        environment=environment,
        metrics={k: float(v) for k, v in metrics.items()},
        timestamp=float(time.time()),
    )
