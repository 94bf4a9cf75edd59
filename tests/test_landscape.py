"""Tests for landscape synthesis and smoothing."""

from __future__ import annotations

import random

import numpy as np
import pytest

from core.noise import NoiseSource
from simulations.minmax_game.landscape import (
    InvalidDimension,
    LandscapeGenerator,
    grid_shape,
    smooth,
)


def _reference_smooth(grid: list[list[float]], temperature: float, reverse: bool) -> list[list[float]]:
    snapshot = [row[:] for row in grid]
    out = [row[:] for row in grid]
    rows, cols = len(grid), len(grid[0])
    order = [(i, j) for i in range(1, rows - 1) for j in range(1, cols - 1)]
    if reverse:
        order.reverse()
    for i, j in order:
        avg = (snapshot[i - 1][j] + snapshot[i + 1][j] + snapshot[i][j - 1] + snapshot[i][j + 1]) / 4.0
        weight = np.exp(-abs(snapshot[i][j] - avg) / temperature)
        out[i][j] = weight * avg + (1 - weight) * snapshot[i][j]
    return out


def test_grid_shape_floors_canvas_by_resolution() -> None:
    assert grid_shape(103, 84, 5) == (16, 20)


@pytest.mark.parametrize("width,height", [(14, 100), (100, 10), (0, 0)])
def test_too_small_canvas_raises_invalid_dimension(width: int, height: int) -> None:
    generator = LandscapeGenerator(NoiseSource(random.Random(0)))
    with pytest.raises(InvalidDimension, match="at least 3x3"):
        generator.generate(width, height, 5)


def test_invalid_dimension_is_value_error() -> None:
    assert issubclass(InvalidDimension, ValueError)


def test_generated_grid_is_bounded_and_read_only() -> None:
    generator = LandscapeGenerator(NoiseSource(random.Random(8)))
    grid = generator.generate(200, 150, 5)

    assert grid.shape == (30, 40)
    assert float(grid.min()) >= 0.0
    assert float(grid.max()) <= 1.0
    with pytest.raises(ValueError):
        grid[0, 0] = 0.5


def test_heavy_noise_is_still_clamped() -> None:
    generator = LandscapeGenerator(NoiseSource(random.Random(2)), noise_scale=5.0, jitter_scale=3.0)
    grid = generator.generate(60, 60, 5)
    assert float(grid.min()) >= 0.0
    assert float(grid.max()) <= 1.0


def test_same_seed_gives_same_landscape() -> None:
    first = LandscapeGenerator(NoiseSource(random.Random(11))).generate(100, 100, 5)
    second = LandscapeGenerator(NoiseSource(random.Random(11))).generate(100, 100, 5)
    assert np.array_equal(first, second)


def test_noise_free_landscape_ignores_rng() -> None:
    first = LandscapeGenerator(NoiseSource(random.Random(1)), noise_scale=0.0, jitter_scale=0.0)
    second = LandscapeGenerator(NoiseSource(random.Random(2)), noise_scale=0.0, jitter_scale=0.0)
    assert np.array_equal(first.generate(100, 80, 5), second.generate(100, 80, 5))


def test_smoothing_reads_from_snapshot_regardless_of_order() -> None:
    rng = random.Random(3)
    grid = [[rng.random() for _ in range(7)] for _ in range(6)]

    result = smooth(np.array(grid), iterations=1, temperature=0.2)
    forward = _reference_smooth(grid, 0.2, reverse=False)
    backward = _reference_smooth(grid, 0.2, reverse=True)

    assert np.allclose(result, forward)
    assert np.allclose(result, backward)


def test_smoothing_leaves_border_untouched() -> None:
    rng = random.Random(4)
    grid = np.array([[rng.random() for _ in range(5)] for _ in range(5)])
    result = smooth(grid, iterations=3)

    assert np.array_equal(result[0, :], grid[0, :])
    assert np.array_equal(result[-1, :], grid[-1, :])
    assert np.array_equal(result[:, 0], grid[:, 0])
    assert np.array_equal(result[:, -1], grid[:, -1])


def test_smoothing_does_not_mutate_input() -> None:
    grid = np.zeros((4, 4))
    grid[1, 1] = 1.0
    before = grid.copy()
    smooth(grid)
    assert np.array_equal(grid, before)


def test_zero_iterations_is_identity() -> None:
    grid = np.arange(16, dtype=float).reshape(4, 4) / 16.0
    assert np.array_equal(smooth(grid, iterations=0), grid)
