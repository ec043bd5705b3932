import numpy as np
import pytest

from julia.colors import (
    OPAQUE_BLACK,
    OPAQUE_WHITE,
    colorize,
    hsl_to_rgb,
    hsl_to_rgb_array,
    julia_color,
)
from julia.params import ColorMode


@pytest.mark.parametrize("hue, expected", [
    (0, (255, 0, 0)),
    (36, (255, 153, 0)),
    (60, (255, 255, 0)),
    (120, (0, 255, 0)),
    (180, (0, 255, 255)),
    (240, (0, 0, 255)),
    (300, (255, 0, 255)),
])
def test_hsl_to_rgb_primary_hues(hue, expected):
    assert hsl_to_rgb(hue, 100, 50) == expected


def test_hsl_to_rgb_grey_when_unsaturated():
    assert hsl_to_rgb(200, 0, 50) == (128, 128, 128)
    assert hsl_to_rgb(10, 0, 0) == (0, 0, 0)
    assert hsl_to_rgb(10, 0, 100) == (255, 255, 255)


def test_hsl_to_rgb_lightness_above_half():
    assert hsl_to_rgb(0, 100, 75) == (255, 128, 128)


def test_hsl_to_rgb_is_deterministic():
    assert hsl_to_rgb(123.4, 100, 50) == hsl_to_rgb(123.4, 100, 50)


@pytest.mark.parametrize("max_iterations", [0, 1, 50, 100])
def test_inside_points_colorful_black_blackwhite_white(max_iterations):
    assert julia_color(max_iterations, max_iterations, ColorMode.COLORFUL) == OPAQUE_BLACK
    assert julia_color(max_iterations, max_iterations, ColorMode.BLACK_WHITE) == OPAQUE_WHITE


def test_escaped_points_are_black_in_blackwhite_mode():
    for iterations in range(100):
        assert julia_color(iterations, 100, ColorMode.BLACK_WHITE) == OPAQUE_BLACK


def test_colorful_escaped_hue_follows_iteration_ratio():
    assert julia_color(0, 100, ColorMode.COLORFUL) == (255, 0, 0, 255)
    assert julia_color(10, 100, ColorMode.COLORFUL) == (255, 153, 0, 255)
    assert julia_color(50, 100, ColorMode.COLORFUL) == (0, 255, 255, 255)
    assert julia_color(1, 3, ColorMode.COLORFUL) == (0, 255, 0, 255)


def test_julia_color_accepts_mode_string():
    assert julia_color(5, 5, "blackwhite") == OPAQUE_WHITE


def test_colorful_output_is_always_opaque():
    for iterations in range(0, 101, 7):
        assert julia_color(iterations, 100, ColorMode.COLORFUL)[3] == 255


def test_array_conversion_matches_scalar():
    hues = np.linspace(0.0, 359.9, 997)
    rgb = hsl_to_rgb_array(hues, 100, 50)
    expected = np.array([hsl_to_rgb(h, 100, 50) for h in hues], dtype=np.uint8)
    assert np.array_equal(rgb, expected)


@pytest.mark.parametrize("mode", list(ColorMode))
def test_colorize_matches_per_pixel_mapper(mode):
    max_iterations = 37
    iterations = np.arange(max_iterations + 1, dtype=np.int32).reshape(2, 19)
    rgba = colorize(iterations, max_iterations, mode)

    assert rgba.shape == (2, 19, 4)
    assert rgba.dtype == np.uint8
    for (y, x), value in np.ndenumerate(iterations):
        assert tuple(rgba[y, x]) == julia_color(int(value), max_iterations, mode)


def test_colorize_zero_iterations_is_all_inside():
    iterations = np.zeros((3, 4), dtype=np.int32)
    colorful = colorize(iterations, 0, ColorMode.COLORFUL)
    blackwhite = colorize(iterations, 0, ColorMode.BLACK_WHITE)
    assert np.all(colorful == np.array(OPAQUE_BLACK, dtype=np.uint8))
    assert np.all(blackwhite == np.array(OPAQUE_WHITE, dtype=np.uint8))
