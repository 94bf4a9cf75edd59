"""Synthetic loss-landscape generation for the min-max game."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.noise import NoiseSource


class InvalidDimension(ValueError):
    """Raised when a canvas is too small to hold a smoothable grid."""


@dataclass(frozen=True)
class GaussianPeak:
    """Bump centred at grid-fraction coordinates ``(x, y)``."""

    x: float
    y: float
    height: float
    spread: float


@dataclass(frozen=True)
class SaddleSource:
    """Hyperbolic saddle ``strength * ((dx/sx)^2 - (dy/sy)^2)``."""

    x: float
    y: float
    strength: float
    spread_x: float
    spread_y: float


PEAKS: tuple[GaussianPeak, ...] = (
    GaussianPeak(x=0.3, y=0.7, height=0.8, spread=0.2),
    GaussianPeak(x=0.7, y=0.3, height=1.0, spread=0.2),
    GaussianPeak(x=0.5, y=0.5, height=0.7, spread=0.3),
    GaussianPeak(x=0.2, y=0.2, height=0.5, spread=0.1),
    GaussianPeak(x=0.8, y=0.8, height=0.6, spread=0.15),
)

SADDLES: tuple[SaddleSource, ...] = (
    SaddleSource(x=0.4, y=0.4, strength=0.3, spread_x=0.2, spread_y=0.3),
    SaddleSource(x=0.6, y=0.6, strength=0.4, spread_x=0.25, spread_y=0.15),
)

SADDLE_WEIGHT = 0.2
MIN_CELLS = 3


def freeze(grid: np.ndarray) -> np.ndarray:
    """Return a read-only float copy of ``grid``."""
    frozen = np.array(grid, dtype=float, copy=True)
    frozen.setflags(write=False)
    return frozen


def grid_shape(width: float, height: float, resolution: float) -> tuple[int, int]:
    """Return ``(rows, cols)`` for a canvas or raise ``InvalidDimension``."""
    if resolution <= 0:
        raise InvalidDimension(f"Resolution must be positive, got {resolution}.")
    cols = int(width // resolution)
    rows = int(height // resolution)
    if cols < MIN_CELLS or rows < MIN_CELLS:
        raise InvalidDimension(
            f"Canvas {width}x{height} at resolution {resolution} yields a {cols}x{rows} grid; "
            f"at least {MIN_CELLS}x{MIN_CELLS} cells are required."
        )
    return rows, cols


def smooth(grid: np.ndarray, iterations: int = 1, temperature: float = 0.2) -> np.ndarray:
    """Relax interior cells toward their 4-neighbour mean.

    Each pass reads from a snapshot of the previous pass and writes to a
    separate buffer, so the result does not depend on traversal order. The
    outermost ring is left untouched. Lower temperatures pull less.
    """
    current = np.array(grid, dtype=float, copy=True)
    for _ in range(max(0, int(iterations))):
        snapshot = current
        interior = snapshot[1:-1, 1:-1]
        neighbor_avg = (
            snapshot[:-2, 1:-1]
            + snapshot[2:, 1:-1]
            + snapshot[1:-1, :-2]
            + snapshot[1:-1, 2:]
        ) / 4.0
        weight = np.exp(-np.abs(interior - neighbor_avg) / temperature)
        relaxed = snapshot.copy()
        relaxed[1:-1, 1:-1] = weight * neighbor_avg + (1.0 - weight) * interior
        current = relaxed
    return current


class LandscapeGenerator:
    """Builds the static scalar field both agents move over."""

    def __init__(
        self,
        noise: NoiseSource,
        noise_scale: float = 0.08,
        jitter_scale: float = 0.02,
        smoothing_iterations: int = 1,
        temperature: float = 0.2,
    ) -> None:
        self.noise = noise
        self.noise_scale = float(noise_scale)
        self.jitter_scale = float(jitter_scale)
        self.smoothing_iterations = int(smoothing_iterations)
        self.temperature = float(temperature)

    def generate(self, width: float, height: float, resolution: float = 5) -> np.ndarray:
        """Return an immutable ``rows x cols`` grid with values in [0, 1]."""
        rows, cols = grid_shape(width, height, resolution)
        base = self.analytic_surface(rows, cols)
        perturbed = base + self._perturbation(rows, cols)
        clamped = np.clip(perturbed, 0.0, 1.0)
        smoothed = smooth(clamped, self.smoothing_iterations, self.temperature)
        return freeze(np.clip(smoothed, 0.0, 1.0))

    @staticmethod
    def analytic_surface(rows: int, cols: int) -> np.ndarray:
        """Peaks plus weighted saddles, before noise and clamping."""
        row_idx, col_idx = np.mgrid[0:rows, 0:cols].astype(float)
        norm = float(cols * cols + rows * rows)

        peaks = np.zeros((rows, cols), dtype=float)
        for peak in PEAKS:
            dist_sq = ((col_idx - peak.x * cols) ** 2 + (row_idx - peak.y * rows) ** 2) / norm
            peaks += peak.height * np.exp(-dist_sq / (2.0 * peak.spread * peak.spread))

        saddles = np.zeros((rows, cols), dtype=float)
        for saddle in SADDLES:
            dx = (col_idx - saddle.x * cols) / cols
            dy = (row_idx - saddle.y * rows) / rows
            saddles += saddle.strength * ((dx / saddle.spread_x) ** 2 - (dy / saddle.spread_y) ** 2)

        return peaks + SADDLE_WEIGHT * saddles

    def _perturbation(self, rows: int, cols: int) -> np.ndarray:
        if self.noise_scale == 0.0 and self.jitter_scale == 0.0:
            return np.zeros((rows, cols), dtype=float)
        values = [
            [
                self.noise_scale * self.noise.standard_normal() + self.jitter_scale * self.noise.uniform()
                for _ in range(cols)
            ]
            for _ in range(rows)
        ]
        return np.array(values, dtype=float)
