"""Tests for gradient estimation, gradient fields and contour extraction."""

from __future__ import annotations

import random

import numpy as np
import pytest

from core.noise import NoiseSource
from simulations.minmax_game.field_analysis import contours, gradient_at, gradient_field
from simulations.minmax_game.landscape import LandscapeGenerator


def _ramp(rows: int = 5, cols: int = 5, step: float = 0.1) -> np.ndarray:
    return np.array([[col * step for col in range(cols)] for _ in range(rows)])


def test_flat_grid_has_zero_gradient_even_with_noise() -> None:
    grid = np.full((20, 20), 0.5)
    vector = gradient_at(grid, 5, 14, noise_level=0.08, noise=NoiseSource(random.Random(1)))

    assert vector.dx == 0.0
    assert vector.dy == 0.0
    assert vector.magnitude == 0.0


def test_central_difference_on_ramp() -> None:
    vector = gradient_at(_ramp(), 2.7, 2.2)

    assert vector.dx == pytest.approx(0.1)
    assert vector.dy == pytest.approx(0.0)
    assert vector.magnitude == pytest.approx(0.1)
    assert (vector.x, vector.y) == (2.7, 2.2)


def test_vertical_gradient_uses_rows() -> None:
    grid = _ramp().T
    vector = gradient_at(grid, 2, 2)
    assert vector.dx == pytest.approx(0.0)
    assert vector.dy == pytest.approx(0.1)


def test_sample_point_is_clamped_inside_border() -> None:
    grid = np.array([[row * 10 + col for col in range(5)] for row in range(4)], dtype=float)

    corner = gradient_at(grid, -3.0, -3.0)
    far = gradient_at(grid, 99.0, 99.0)

    # Both neighbours exist on each axis after clamping.
    assert corner.dx == pytest.approx(1.0)
    assert corner.dy == pytest.approx(10.0)
    assert far.dx == pytest.approx(1.0)
    assert far.dy == pytest.approx(10.0)


def test_noise_requires_a_source() -> None:
    with pytest.raises(ValueError, match="noise source"):
        gradient_at(_ramp(), 2, 2, noise_level=0.1)


def test_noise_is_proportional_to_component_magnitude() -> None:
    noise = NoiseSource(random.Random(9))
    samples = [gradient_at(_ramp(), 2, 2, noise_level=0.05, noise=noise) for _ in range(500)]

    assert all(sample.dy == 0.0 for sample in samples)
    assert all(abs(sample.dx - 0.1) <= 0.1 * 0.05 * 6 for sample in samples)
    assert len({sample.dx for sample in samples}) > 1


def test_gradient_field_lattice_order_and_filter() -> None:
    vectors = gradient_field(_ramp(), spacing=2)

    assert [(v.x, v.y) for v in vectors] == [(2.0, 2.0), (4.0, 2.0), (2.0, 4.0), (4.0, 4.0)]
    assert all(v.magnitude == pytest.approx(0.1) for v in vectors)


def test_gradient_field_skips_flat_regions() -> None:
    assert gradient_field(np.full((30, 30), 0.4), spacing=5) == []


def test_gradient_field_is_repeatable() -> None:
    grid = LandscapeGenerator(NoiseSource(random.Random(4))).generate(200, 200, 5)
    assert gradient_field(grid, 5) == gradient_field(grid, 5)


def test_contours_interpolate_edge_crossings() -> None:
    grid = np.array([[0.0, 1.0], [0.0, 1.0]])
    result = contours(grid, levels=2)

    assert [c.level for c in result] == [0.5, 1.0]
    assert result[0].points == ((0.5, 0.0), (0.5, 1.0))
    # A corner exactly at the threshold counts as above it.
    assert result[1].points == ((1.0, 0.0), (1.0, 1.0))


def test_contour_points_follow_cell_then_edge_order() -> None:
    grid = np.array(
        [
            [0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
        ]
    )
    result = contours(grid, levels=2)[0]

    # Left cell: edges 1->2 and 2->3 cross; right cell: edges 2->3 and 3->0.
    assert result.points == ((1.0, 0.5), (0.5, 1.0), (1.5, 1.0), (1.0, 0.5))


def test_contours_are_deterministic() -> None:
    grid = LandscapeGenerator(NoiseSource(random.Random(6))).generate(150, 100, 5)
    first = contours(grid, 15)
    second = contours(grid, 15)

    assert first == second
    assert len(first) == 15
    assert first[-1].level == 1.0
