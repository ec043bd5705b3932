import numpy as np
import pytest

from julia.complex import Complex
from julia.escape import escape_time, escape_time_grid, pixel_to_complex
from julia.params import ViewParams


@pytest.fixture
def reference_params():
    return ViewParams(
        c=Complex(-0.8, 0.156),
        max_iterations=100,
        scale=300,
        escape_radius=2,
        center=(0, 0),
    )


def test_pixel_to_complex(reference_params):
    assert pixel_to_complex(0, 0, reference_params) == Complex(0.0, 0.0)
    assert pixel_to_complex(300, -150, reference_params) == Complex(1.0, -0.5)


def test_pixel_to_complex_uses_center():
    params = ViewParams(scale=100, center=(200, 100))
    assert pixel_to_complex(250, 50, params) == Complex(0.5, -0.5)


@pytest.mark.parametrize("px, py, expected", [
    (0, 0, 100),
    (100, 50, 10),
    (450, 0, 3),
    (600, 0, 0),
    (0, 450, 0),
    (-300, -300, 0),
])
def test_golden_iteration_counts(reference_params, px, py, expected):
    assert escape_time(px, py, reference_params) == expected


def test_dendrite_origin_is_preperiodic_and_stays_bounded():
    params = ViewParams(c=Complex(0.0, 1.0), max_iterations=100, center=(0, 0))
    assert escape_time(0, 0, params) == 100


def test_zero_iterations_returns_zero_everywhere(reference_params):
    reference_params.set_max_iterations(0)
    assert escape_time(0, 0, reference_params) == 0
    assert escape_time(-300, -300, reference_params) == 0
    counts = escape_time_grid(reference_params, 7, 5)
    assert counts.shape == (5, 7)
    assert not counts.any()


def test_overflow_counts_as_escaped():
    params = ViewParams(
        c=Complex(-0.8, 0.156), max_iterations=100, scale=50,
        escape_radius=1e308, center=(0, 0),
    )
    # |z| reaches ~1e275; squaring it overflows to inf
    assert escape_time(1_000_000, 0, params) == 5


def test_increasing_max_iterations_never_decreases_count(reference_params):
    reference_params.set_center(20, 15)
    reference_params.set_scale(60)
    short = reference_params.copy()
    short.set_max_iterations(20)
    longer = reference_params.copy()
    longer.set_max_iterations(80)

    short_counts = escape_time_grid(short, 40, 30)
    long_counts = escape_time_grid(longer, 40, 30)

    assert np.all(long_counts >= short_counts)
    escaped = short_counts < 20
    assert np.array_equal(long_counts[escaped], short_counts[escaped])


def test_grid_matches_scalar_loop(reference_params):
    reference_params.set_center(16, 12)
    reference_params.set_scale(50)
    width, height = 32, 24
    counts = escape_time_grid(reference_params, width, height)

    expected = np.array(
        [[escape_time(x, y, reference_params) for x in range(width)] for y in range(height)],
        dtype=np.int32,
    )
    assert counts.dtype == np.int32
    assert np.array_equal(counts, expected)


def test_grid_layout_is_row_major_from_top_left(reference_params):
    counts = escape_time_grid(reference_params, 3, 2)
    assert counts[0, 0] == escape_time(0, 0, reference_params)
    assert counts[1, 2] == escape_time(2, 1, reference_params)


def test_grid_handles_overflow_without_warnings():
    params = ViewParams(
        c=Complex(-0.8, 0.156), max_iterations=100, scale=50,
        escape_radius=1e308, center=(-1_000_000, 0),
    )
    with np.errstate(all="raise"):
        counts = escape_time_grid(params, 2, 1)
    assert counts[0, 0] == escape_time(0, 0, params) == 5


def test_empty_viewport(reference_params):
    assert escape_time_grid(reference_params, 0, 10).shape == (10, 0)
