"""Tests for the stateless game engine and its state values."""

from __future__ import annotations

import json
import random

import numpy as np
import pytest

from core.noise import NoiseSource
from simulations.minmax_game.dynamics import Position
from simulations.minmax_game.engine import GameConfig, GameEngine
from simulations.minmax_game.landscape import InvalidDimension
from simulations.minmax_game.state import SimulationState, append_bounded


def _engine(seed: int = 1, **overrides) -> GameEngine:
    config = GameConfig(canvas_width=100, canvas_height=100, **overrides)
    return GameEngine(config, NoiseSource(random.Random(seed)))


def test_initial_state_places_agents_and_scores_once() -> None:
    state = _engine().initialize()

    assert (state.rows, state.cols) == (20, 20)
    assert state.iteration == 0
    assert state.landscape_version == 1
    assert state.defender.x == pytest.approx(6.0)
    assert state.defender.y == pytest.approx(14.0)
    assert state.adversary.x == pytest.approx(14.0)
    assert state.adversary.y == pytest.approx(6.0)
    assert state.defender_history == ()
    assert len(state.loss_history.defender) == 1
    assert state.loss_history.defender[0] == state.defender_loss
    assert len(state.contours) == 15
    assert state.last_step is None


def test_start_positions_are_clamped_to_board() -> None:
    smallest = _engine().initialize(15, 15)
    assert (smallest.rows, smallest.cols) == (3, 3)
    corner = _engine(defender_start_x=1.0, adversary_start_y=1.0).initialize()

    for state in (smallest, corner):
        for position in (state.defender, state.adversary):
            assert 0.0 <= position.x <= state.cols - 1
            assert 0.0 <= position.y <= state.rows - 1
    assert corner.defender.x == 19.0
    assert corner.adversary.y == 19.0


def test_too_small_canvas_produces_no_state() -> None:
    with pytest.raises(InvalidDimension):
        _engine().initialize(10, 10)


def test_histories_are_capped_fifo() -> None:
    engine = _engine(seed=2)
    states = [engine.initialize()]
    for _ in range(120):
        states.append(engine.advance(states[-1]))
    final = states[-1]

    assert final.iteration == 120
    assert len(final.defender_history) == 50
    assert len(final.adversary_history) == 50
    assert final.defender_history[0] == states[71].defender
    assert final.defender_history[-1] == final.defender
    assert len(final.loss_history.defender) == 100
    assert len(final.loss_history.adversary) == 100
    assert final.loss_history.defender[0] == states[21].defender_loss
    assert final.loss_history.adversary[-1] == final.adversary_loss


def test_advance_does_not_touch_previous_state() -> None:
    engine = _engine(seed=3)
    before = engine.initialize()
    after = engine.advance(before, 5, 8)

    assert before.iteration == 0
    assert before.defender_history == ()
    assert len(before.loss_history.defender) == 1
    assert after.iteration == 1
    assert after.grid is before.grid
    assert after.last_step is not None
    assert after.last_step.max_perturbation == pytest.approx(0.2 * 8 * 1.2)


def test_regenerate_resets_session_and_bumps_version() -> None:
    engine = _engine(seed=4)
    state = engine.initialize()
    for _ in range(10):
        state = engine.advance(state)

    fresh = engine.regenerate(state, 200, 150)

    assert fresh.landscape_version == 2
    assert fresh.iteration == 0
    assert (fresh.rows, fresh.cols) == (30, 40)
    assert fresh.defender_history == ()
    assert len(fresh.loss_history.defender) == 1
    assert engine.regenerate(fresh, 200, 150).landscape_version == 3


def test_rescore_appends_without_moving() -> None:
    engine = _engine(seed=5)
    state = engine.initialize()
    rescored = engine.rescore(state, 1, 10)

    assert rescored.defender == state.defender
    assert rescored.iteration == state.iteration
    assert len(rescored.loss_history.defender) == 2


def test_balanced_strengths_have_no_systematic_gap() -> None:
    engine = _engine(seed=6)
    state = SimulationState(grid=np.full((20, 20), 0.5), defender=Position(6, 14), adversary=Position(14, 6))
    gaps = []
    for _ in range(500):
        state = engine.advance(state, 5, 5)
        gaps.append(state.defender_loss - state.adversary_loss)

    assert sum(gaps) / len(gaps) == pytest.approx(0.0, abs=0.02)


def test_state_to_dict_is_json_compatible() -> None:
    engine = _engine(seed=7)
    state = engine.advance(engine.initialize())

    payload = state.to_dict()
    json.dumps(payload)
    assert payload["iteration"] == 1
    assert len(payload["grid"]) == 20
    assert "grid" not in state.to_dict(include_landscape=False)


def test_append_bounded_evicts_oldest() -> None:
    assert append_bounded((1, 2, 3), 4, 3) == (2, 3, 4)
    assert append_bounded((), 1, 3) == (1,)
