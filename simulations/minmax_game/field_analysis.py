"""Read-only views over a landscape grid: gradients and contour crossings."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.noise import NoiseSource

MIN_FIELD_MAGNITUDE_SQ = 1e-4


@dataclass(frozen=True)
class GradientVector:
    """Central-difference gradient sampled at ``(x, y)``."""

    x: float
    y: float
    dx: float
    dy: float
    magnitude: float

    def to_dict(self) -> dict[str, float]:
        return {
            "x": float(self.x),
            "y": float(self.y),
            "dx": float(self.dx),
            "dy": float(self.dy),
            "magnitude": float(self.magnitude),
        }


@dataclass(frozen=True)
class Contour:
    """Unstitched threshold crossings; consumers draw points pairwise."""

    level: float
    points: tuple[tuple[float, float], ...]

    def to_dict(self) -> dict[str, object]:
        return {"level": float(self.level), "points": [list(point) for point in self.points]}


def gradient_at(
    grid: np.ndarray,
    x: float,
    y: float,
    noise_level: float = 0.0,
    noise: NoiseSource | None = None,
) -> GradientVector:
    """Estimate the gradient at ``(x, y)`` with optional multiplicative noise.

    The sample cell is clamped to ``[1, cols-2] x [1, rows-2]`` so both
    neighbours exist on each axis. When ``noise_level > 0`` each component is
    perturbed by ``N(0, 1) * noise_level * |component|``.
    """
    rows, cols = grid.shape
    row = min(max(int(math.floor(y)), 1), rows - 2)
    col = min(max(int(math.floor(x)), 1), cols - 2)

    dx = float(grid[row, col + 1] - grid[row, col - 1]) / 2.0
    dy = float(grid[row + 1, col] - grid[row - 1, col]) / 2.0

    if noise_level > 0:
        if noise is None:
            raise ValueError("A noise source is required when noise_level > 0.")
        dx += noise.standard_normal() * noise_level * abs(dx)
        dy += noise.standard_normal() * noise_level * abs(dy)

    return GradientVector(x=float(x), y=float(y), dx=dx, dy=dy, magnitude=math.hypot(dx, dy))


def gradient_field(grid: np.ndarray, spacing: int = 20) -> list[GradientVector]:
    """Sample noise-free gradients on a regular lattice, skipping flat spots."""
    step = max(1, int(spacing))
    rows, cols = grid.shape
    vectors: list[GradientVector] = []
    for row in range(step, rows, step):
        for col in range(step, cols, step):
            vector = gradient_at(grid, col, row, 0.0)
            if vector.dx * vector.dx + vector.dy * vector.dy > MIN_FIELD_MAGNITUDE_SQ:
                vectors.append(vector)
    return vectors


def contours(grid: np.ndarray, levels: int = 15) -> list[Contour]:
    """Marching-squares edge crossings for ``levels`` equally spaced thresholds.

    Every unit cell is treated as a quad with corners top-left, top-right,
    bottom-right, bottom-left; edges are scanned 0->1, 1->2, 2->3, 3->0. A
    value equal to the threshold counts as above it. Points come out in
    row-major cell order, then edge order within each cell.
    """
    values = np.asarray(grid, dtype=float)
    rows, cols = values.shape
    col_idx, row_idx = np.meshgrid(np.arange(cols - 1, dtype=float), np.arange(rows - 1, dtype=float))

    corner_values = (values[:-1, :-1], values[:-1, 1:], values[1:, 1:], values[1:, :-1])
    corner_x = (col_idx, col_idx + 1.0, col_idx + 1.0, col_idx)
    corner_y = (row_idx, row_idx, row_idx + 1.0, row_idx + 1.0)

    result: list[Contour] = []
    for k in range(1, int(levels) + 1):
        threshold = k / levels
        masks = []
        xs = []
        ys = []
        for m in range(4):
            n = (m + 1) % 4
            a = corner_values[m]
            b = corner_values[n]
            crossing = (a < threshold) != (b < threshold)
            with np.errstate(divide="ignore", invalid="ignore"):
                t = np.where(crossing, (threshold - a) / np.where(crossing, b - a, 1.0), 0.0)
            masks.append(crossing)
            xs.append(corner_x[m] + t * (corner_x[n] - corner_x[m]))
            ys.append(corner_y[m] + t * (corner_y[n] - corner_y[m]))

        mask = np.stack(masks, axis=-1)
        px = np.stack(xs, axis=-1)[mask]
        py = np.stack(ys, axis=-1)[mask]
        points = tuple((float(x), float(y)) for x, y in zip(px.tolist(), py.tolist()))
        result.append(Contour(level=threshold, points=points))
    return result
