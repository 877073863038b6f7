# maskpath/transform.py
"""
Coordinate mapping between the four representations of one image.

- ORIGINAL:    natural pixel size of the source image
- MODEL_INPUT: image resized for the encoder (longest side UPLOAD_IMAGE_SIZE)
- MASK_GRID:   probability grid predicted by the decoder
- CANVAS:      on-screen render size chosen by the caller

Every mapping is a uniform multiply; nothing is clamped.
"""

import math
from typing import Tuple, Union

import numpy as np

from . import config
from .errors import InvalidExtent
from .models import ImageExtent, Point, ScaleProfile, Space


def _check_positive(name: str, value: float) -> None:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidExtent(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidExtent(f"{name} must be finite and > 0, got {value!r}")


def compute_preview_scale(width: float, height: float) -> float:
    """
    Scale from ORIGINAL to MASK_GRID.

    The shorter side is brought to PREVIEW_IMAGE_SIZE first; if that pushes the
    longer side past PREVIEW_MAX_SIZE the scale is recomputed from the ceiling.
    """
    long_side = max(width, height)
    scale = config.PREVIEW_IMAGE_SIZE / min(width, height)
    if long_side * scale > config.PREVIEW_MAX_SIZE:
        scale = config.PREVIEW_MAX_SIZE / long_side
    return scale


def compute_scale_profile(extent: ImageExtent, canvas_scale: float = 1.0) -> ScaleProfile:
    """Derive every scale factor for an image of the given natural size."""
    _check_positive("width", extent.width)
    _check_positive("height", extent.height)
    _check_positive("canvas_scale", canvas_scale)

    w, h = extent.width, extent.height
    upload_scale = config.UPLOAD_IMAGE_SIZE / max(w, h)
    preview_scale = compute_preview_scale(w, h)

    return ScaleProfile(
        width=w,
        height=h,
        upload_scale=upload_scale,
        preview_scale=preview_scale,
        onnx_scale=preview_scale / upload_scale,
        canvas_scale=canvas_scale,
    )


def fit_canvas_scale(extent: ImageExtent, frame_width: float, frame_height: float) -> float:
    """Largest scale that fits the whole image inside a frame."""
    _check_positive("width", extent.width)
    _check_positive("height", extent.height)
    _check_positive("frame_width", frame_width)
    _check_positive("frame_height", frame_height)
    return min(frame_width / extent.width, frame_height / extent.height)


def space_scale(profile: ScaleProfile, space: Space) -> float:
    """Factor mapping ORIGINAL coordinates into `space`."""
    if space == Space.ORIGINAL:
        return 1.0
    if space == Space.MODEL_INPUT:
        return profile.upload_scale
    if space == Space.MASK_GRID:
        return profile.preview_scale
    if space == Space.CANVAS:
        return profile.canvas_scale
    raise ValueError(f"unknown space: {space!r}")


def scale_between(profile: ScaleProfile, from_space: Space, to_space: Space) -> float:
    """Uniform factor mapping `from_space` coordinates into `to_space`."""
    if from_space == to_space:
        return 1.0
    # The decoder works from the upload-scaled embedding but predicts at
    # preview resolution; use the stored ratio rather than re-deriving it.
    if from_space == Space.MODEL_INPUT and to_space == Space.MASK_GRID:
        return profile.onnx_scale
    if from_space == Space.MASK_GRID and to_space == Space.MODEL_INPUT:
        return 1.0 / profile.onnx_scale
    return space_scale(profile, to_space) / space_scale(profile, from_space)


def transform(point: Union[Point, Tuple[float, float]], from_space: Space, to_space: Space,
              profile: ScaleProfile) -> Point:
    """Map a single point between spaces."""
    if not isinstance(point, Point):
        point = Point(x=point[0], y=point[1])
    s = scale_between(profile, from_space, to_space)
    return Point(x=point.x * s, y=point.y * s)


def transform_extent(width: float, height: float, from_space: Space, to_space: Space,
                     profile: ScaleProfile) -> Tuple[float, float]:
    """Map a width/height pair between spaces."""
    s = scale_between(profile, from_space, to_space)
    return width * s, height * s


def transform_points(points: np.ndarray, from_space: Space, to_space: Space,
                     profile: ScaleProfile) -> np.ndarray:
    """Map an (N, 2) array of points between spaces."""
    pts = np.asarray(points, dtype=np.float64)
    return pts * scale_between(profile, from_space, to_space)
