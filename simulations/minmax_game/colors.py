"""Scalar-to-colour mapping for landscape rendering."""

from __future__ import annotations

import math

COLOR_STOPS: tuple[tuple[int, int, int], ...] = (
    (245, 167, 66),
    (230, 190, 120),
    (180, 210, 170),
    (66, 245, 209),
)


def color_for(value: float) -> tuple[int, int, int]:
    """Piecewise-linear RGB for ``value`` in [0, 1]; out-of-range input is clamped."""
    value = min(max(float(value), 0.0), 1.0)
    position = value * (len(COLOR_STOPS) - 1)
    index = min(max(int(math.floor(position)), 0), len(COLOR_STOPS) - 2)
    t = position - index
    low = COLOR_STOPS[index]
    high = COLOR_STOPS[index + 1]
    # Half-up rounding, not round-half-even.
    r, g, b = (int(math.floor(lo + t * (hi - lo) + 0.5)) for lo, hi in zip(low, high))
    return (r, g, b)


def css_rgb(value: float) -> str:
    r, g, b = color_for(value)
    return f"rgb({r}, {g}, {b})"
