import numpy as np
import pytest

from bandbrot.params import RenderParameters
from bandbrot.viewport import apply_zoom, compute_zoom_factors, recenter, zoom_sequence, zoom_to_rect


@pytest.fixture
def square_view():
    return RenderParameters(width=100, height=100, center_x=0.0, center_y=0.0, view_size=4.0)


def test_small_rectangles_are_ignored(square_view):
    assert zoom_to_rect(square_view, 10, 10, 14, 60) is square_view
    assert zoom_to_rect(square_view, 10, 10, 60, 12) is square_view


def test_centered_rectangle_halves_size(square_view):
    zoomed = zoom_to_rect(square_view, 25, 25, 75, 75)
    assert zoomed.center_x == 0.0
    assert zoomed.center_y == 0.0
    assert zoomed.view_size == 2.0


def test_rectangle_uses_larger_extent(square_view):
    zoomed = zoom_to_rect(square_view, 0, 0, 50, 20)
    assert zoomed.view_size == 2.0
    assert zoomed.center_x == pytest.approx(-1.0)
    assert zoomed.center_y == pytest.approx(-1.6)


def test_rectangle_direction_does_not_matter(square_view):
    assert zoom_to_rect(square_view, 75, 75, 25, 25) == zoom_to_rect(square_view, 25, 25, 75, 75)


def test_recenter_keeps_size(square_view):
    moved = recenter(square_view, 75, 50)
    assert moved.center_x == 1.0
    assert moved.center_y == 0.0
    assert moved.view_size == square_view.view_size


def test_apply_zoom(square_view):
    assert apply_zoom(square_view, 0.5).view_size == 2.0


def test_zoom_factors_constant():
    np.testing.assert_array_equal(compute_zoom_factors(3, 0.8, final_zoom=None, easing="ease"), [0.8, 0.8, 0.8])
    assert compute_zoom_factors(0, 0.8, final_zoom=None, easing="ease").size == 0


@pytest.mark.parametrize("easing", ["linear", "ease"])
def test_zoom_factors_reach_final_zoom(easing):
    factors = compute_zoom_factors(10, 0.8, final_zoom=1e-3, easing=easing)
    assert factors.size == 10
    assert factors[0] == pytest.approx(1.0)
    assert np.prod(factors) == pytest.approx(1e-3)


def test_zoom_sequence(square_view):
    sizes = [p.view_size for p in zoom_sequence(square_view, np.array([1.0, 0.5, 0.5]))]
    assert sizes == [4.0, 2.0, 1.0]
