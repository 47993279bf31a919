import numpy as np
import pytest

from bandbrot.evaluator import escape_time
from bandbrot.params import PaletteKind, RenderParameters
from bandbrot.sampler import pixel_to_complex, sample_offsets, sample_pixel, sample_rows


@pytest.fixture
def small_view():
    return RenderParameters(
        width=4,
        height=4,
        center_x=-0.5,
        center_y=0.0,
        view_size=3.0,
        max_iterations=50,
        samples=1,
        palette=PaletteKind.GRAYSCALE,
    )


def test_top_left_pixel_mapping(small_view):
    assert pixel_to_complex(0, 0, small_view) == (-2.0, -1.5)


def test_vertical_extent_follows_aspect():
    params = RenderParameters(width=8, height=4, center_x=0.0, center_y=0.0, view_size=4.0)
    cx, cy = pixel_to_complex(0, 0, params)
    assert cx == -2.0
    assert cy == -1.0


def test_offsets_single_sample_is_pixel_corner():
    np.testing.assert_array_equal(sample_offsets(1), [0.0])
    np.testing.assert_array_equal(sample_offsets(0), [0.0])


def test_offsets_are_evenly_spaced_inside_pixel():
    np.testing.assert_allclose(sample_offsets(3), [0.25, 0.5, 0.75])
    offsets = sample_offsets(5)
    assert offsets.size == 5
    assert np.all((offsets > 0.0) & (offsets < 1.0))


def test_single_sample_matches_direct_evaluation(small_view):
    for y in range(small_view.height):
        for x in range(small_view.width):
            cx, cy = pixel_to_complex(x, y, small_view)
            assert sample_pixel(x, y, small_view) == escape_time(cx, cy, small_view.max_iterations)


def test_supersampled_pixel_is_floor_of_mean():
    params = RenderParameters(width=6, height=5, center_x=-0.75, center_y=0.1, view_size=2.5,
                              max_iterations=40, samples=3)
    x, y = 2, 1
    counts = []
    for ox in (0.25, 0.5, 0.75):
        for oy in (0.25, 0.5, 0.75):
            cx, cy = pixel_to_complex(x + ox, y + oy, params)
            counts.append(escape_time(cx, cy, params.max_iterations))
    assert sample_pixel(x, y, params) == sum(counts) // 9


@pytest.mark.parametrize("samples", [1, 2, 3])
def test_rows_match_per_pixel_sampling(samples):
    params = RenderParameters(width=7, height=6, center_x=-0.5, center_y=0.0, view_size=3.0,
                              max_iterations=30, samples=samples)
    rows = sample_rows(params, 1, 5)
    assert rows.shape == (4, 7)
    for r in range(4):
        for x in range(7):
            assert rows[r, x] == sample_pixel(x, r + 1, params)


def test_rows_empty_range():
    params = RenderParameters(width=5, height=3, samples=2, max_iterations=10)
    assert sample_rows(params, 3, 3).shape == (0, 5)
