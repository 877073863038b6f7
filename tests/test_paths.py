"""Tests for turning contours into a canvas-space vector path."""

import numpy as np
import pytest

from maskpath.contours import trace_mask
from maskpath.models import ImageExtent, ProbabilityGrid, Space
from maskpath.paths import build_grid_path, build_mask_path, contour_to_svg_path, path_data
from maskpath.transform import compute_scale_profile, scale_between


def test_no_contours_gives_no_path():
    assert build_mask_path([], 2.0) is None
    assert path_data(None) == ""


def test_scaling_preserves_grouping_and_winding():
    mask = np.zeros((5, 5), dtype=bool)
    mask[1:4, 1:4] = True
    mask[2, 2] = False
    contours = trace_mask(mask)

    path = build_mask_path(contours, 2.5)
    assert path is not None
    assert len(path.contours) == 2
    assert path.scale == 2.5
    for original, scaled in zip(contours, path.contours):
        assert scaled.hole == original.hole
        assert scaled.points == [(x * 2.5, y * 2.5) for x, y in original.points]
        assert scaled.signed_area == pytest.approx(original.signed_area * 2.5 ** 2)


def test_unknown_fill_rule():
    with pytest.raises(ValueError):
        build_mask_path(trace_mask(np.ones((2, 2), dtype=bool)), 1.0, fill_rule="winding")


def test_svg_path_data():
    assert contour_to_svg_path([(0, 0), (3, 0), (3, 2)]) == "M0.00 0.00 L3.00 0.00 L3.00 2.00 Z"
    path = build_mask_path(trace_mask(np.ones((1, 1), dtype=bool)), 1.0)
    assert path_data(path) == "M0.00 0.00 L1.00 0.00 L1.00 1.00 L0.00 1.00 Z"


def test_grid_path_lands_in_canvas_space():
    profile = compute_scale_profile(ImageExtent(width=1000, height=500), canvas_scale=0.8)
    grid = ProbabilityGrid.from_array(np.ones((profile.mask_height, profile.mask_width)))

    path = build_grid_path(grid, profile)
    assert path is not None
    xs = [x for x, _ in path.contours[0].points]
    ys = [y for _, y in path.contours[0].points]
    # A full mask covers the whole image on the canvas
    assert max(xs) == pytest.approx(1000 * 0.8)
    assert max(ys) == pytest.approx(500 * 0.8)
    assert path.scale == pytest.approx(scale_between(profile, Space.MASK_GRID, Space.CANVAS))


def test_grid_path_empty_mask():
    profile = compute_scale_profile(ImageExtent(width=10, height=10))
    grid = ProbabilityGrid.from_array(np.full((4, 4), -3.0))
    assert build_grid_path(grid, profile) is None


def test_grid_path_all_zero_grid_is_empty():
    profile = compute_scale_profile(ImageExtent(width=10, height=10))
    grid = ProbabilityGrid.from_array(np.zeros((4, 4)))
    assert build_grid_path(grid, profile) is None
