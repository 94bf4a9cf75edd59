from __future__ import annotations

import pytest

from simulations.minmax_game.colors import COLOR_STOPS, color_for, css_rgb


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.0, (245, 167, 66)),
        (1.0 / 3.0, (230, 190, 120)),
        (0.5, (205, 200, 145)),
        (1.0, (66, 245, 209)),
    ],
)
def test_color_stops_and_interpolation(value: float, expected: tuple[int, int, int]) -> None:
    assert color_for(value) == expected


def test_out_of_range_values_are_clamped() -> None:
    assert color_for(-0.5) == COLOR_STOPS[0]
    assert color_for(3.0) == COLOR_STOPS[-1]


def test_channels_are_integers_in_byte_range() -> None:
    for step in range(101):
        rgb = color_for(step / 100)
        assert all(isinstance(channel, int) and 0 <= channel <= 255 for channel in rgb)


def test_css_rgb_format() -> None:
    assert css_rgb(0.0) == "rgb(245, 167, 66)"
