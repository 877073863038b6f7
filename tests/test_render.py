"""Tests for the overlay / cutout rendering collaborator."""

import numpy as np
import pytest
from PIL import Image

from maskpath.contours import trace_mask
from maskpath.paths import build_mask_path
from maskpath.render import (
    image_data_uri,
    image_extent,
    load_image,
    path_to_svg,
    pil_to_base64_png,
    rasterize_path,
    render_cutout,
    render_overlay,
)


def ring_mask(size: int = 7) -> np.ndarray:
    mask = np.zeros((size, size), dtype=bool)
    mask[1:size - 1, 1:size - 1] = True
    mask[3:size - 3, 3:size - 3] = False
    return mask


@pytest.mark.parametrize("fill_rule", ["nonzero", "evenodd"])
def test_ring_rasterizes_without_its_hole(fill_rule):
    mask = ring_mask()
    path = build_mask_path(trace_mask(mask), 1.0, fill_rule=fill_rule)
    np.testing.assert_array_equal(rasterize_path(path, 7, 7), mask)


def test_rasterize_scaled_path():
    mask = ring_mask()
    path = build_mask_path(trace_mask(mask), 2.0)
    covered = rasterize_path(path, 14, 14)
    expected = np.kron(mask, np.ones((2, 2), dtype=bool))
    np.testing.assert_array_equal(covered, expected)


def test_rasterize_no_path():
    assert not rasterize_path(None, 4, 3).any()


def test_overlay_svg():
    path = build_mask_path(trace_mask(ring_mask()), 1.0)
    svg = path_to_svg(path, 7, 7, image="aGVsbG8=", mode="overlay")
    assert svg.startswith("<svg")
    assert 'xlink:href="data:image/png;base64,aGVsbG8="' in svg
    assert 'fill-rule="nonzero"' in svg
    assert 'fill-opacity="0.4"' in svg
    assert svg.count("M") == 2


def test_cutout_svg_clips_image():
    path = build_mask_path(trace_mask(ring_mask()), 1.0, fill_rule="evenodd")
    svg = path_to_svg(path, 7, 7, image="data:image/png;base64,aGVsbG8=", mode="cutout")
    assert '<clipPath id="selection">' in svg
    assert 'clip-rule="evenodd"' in svg
    assert 'clip-path="url(#selection)"' in svg


def test_unknown_mode():
    with pytest.raises(ValueError):
        path_to_svg(None, 1, 1, mode="blend")


def test_render_cutout_alpha():
    image = Image.new("RGB", (7, 7), (200, 100, 50))
    path = build_mask_path(trace_mask(ring_mask()), 1.0)
    out = render_cutout(image, path, 1.0)
    alpha = np.asarray(out)[..., 3]
    np.testing.assert_array_equal(alpha > 0, ring_mask())


def test_render_overlay_tints_selection_only():
    image = Image.new("RGB", (7, 7), (255, 255, 255))
    path = build_mask_path(trace_mask(ring_mask()), 1.0)
    out = np.asarray(render_overlay(image, path, 1.0, overlay_color="#0000ff", overlay_alpha=0.5))
    assert tuple(out[0, 0]) == (255, 255, 255)
    assert tuple(out[3, 3]) == (255, 255, 255)
    assert tuple(out[1, 1]) == (127, 127, 255)


def test_load_image_accepts_pil_and_base64():
    image = Image.new("RGBA", (5, 3), (1, 2, 3, 255))
    assert load_image(image) is image

    encoded = pil_to_base64_png(image)
    assert load_image(encoded).size == (5, 3)
    assert load_image(encoded.partition(",")[2]).size == (5, 3)

    extent = image_extent(encoded)
    assert (extent.width, extent.height) == (5, 3)


def test_image_data_uri():
    assert image_data_uri("aGVsbG8=") == "data:image/png;base64,aGVsbG8="
    assert image_data_uri("data:image/jpeg;base64,aGVsbG8=") == "data:image/jpeg;base64,aGVsbG8="
    assert image_data_uri(Image.new("RGB", (2, 2))).startswith("data:image/png;base64,")


def test_svg_embeds_pil_image():
    image = Image.new("RGB", (7, 7), (10, 20, 30))
    svg = path_to_svg(None, 7, 7, image=image)
    assert 'xlink:href="data:image/png;base64,' in svg


def test_render_cutout_from_base64():
    image = Image.new("RGB", (7, 7), (200, 100, 50))
    path = build_mask_path(trace_mask(ring_mask()), 1.0)
    out = render_cutout(pil_to_base64_png(image), path, 1.0)
    np.testing.assert_array_equal(np.asarray(out)[..., 3] > 0, ring_mask())
