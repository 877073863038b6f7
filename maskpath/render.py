# maskpath/render.py
"""
Rendering collaborator: turns a VectorPath plus the source image into SVG
documents or RGBA bitmaps.

Two intents:
- overlay: translucent fill over the image, used while editing
- cutout:  everything outside the selection erased, used for export
"""

import base64
import html
import io
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

# Configure matplotlib for headless environments
import matplotlib
matplotlib.use("Agg")
from matplotlib.path import Path as MplPath

from . import config
from .models import ImageExtent, VectorPath
from .paths import path_data

MODES = ("overlay", "cutout")


# ==========================
# BASE64 / IMAGE HELPERS
# ==========================

ImageSource = Union[Image.Image, str]


def _split_base64(b64: str) -> Tuple[str, str]:
    """(data URI header or "", payload) for raw base64 or a data URI."""
    header, _, payload = b64.partition(",")
    if payload == "":
        return "", header
    return header, payload


def load_image(source: ImageSource) -> Image.Image:
    """PIL image from a PIL image, raw base64 or a data URI."""
    if isinstance(source, Image.Image):
        return source
    _, payload = _split_base64(source)
    return Image.open(io.BytesIO(base64.b64decode(payload)))


def pil_to_base64_png(img: Image.Image) -> str:
    """Convert a PIL image to data:image/png;base64,..."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"


def image_data_uri(source: ImageSource) -> str:
    if isinstance(source, Image.Image):
        return pil_to_base64_png(source)
    header, payload = _split_base64(source)
    if not header:
        return f"data:image/png;base64,{payload}"
    return source


def image_extent(source: ImageSource) -> ImageExtent:
    """Natural pixel size of a source image."""
    img = load_image(source)
    return ImageExtent(width=img.width, height=img.height)


def canvas_size(extent: ImageExtent, canvas_scale: float) -> Tuple[int, int]:
    return (
        max(1, int(round(extent.width * canvas_scale))),
        max(1, int(round(extent.height * canvas_scale))),
    )


# ==========================
# SVG
# ==========================

def path_to_svg(
    path: Optional[VectorPath],
    width: int,
    height: int,
    image: Optional[ImageSource] = None,
    mode: str = "overlay",
    overlay_color: Optional[str] = None,
    overlay_alpha: Optional[float] = None,
) -> str:
    """
    Build an SVG document of canvas size `width` x `height`.

    overlay: embedded image (optional) with the selection filled on top.
    cutout:  embedded image clipped to the selection; with no path nothing
             of the image is kept.
    """
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
    if overlay_color is None:
        overlay_color = config.OVERLAY_COLOR
    if overlay_alpha is None:
        overlay_alpha = config.OVERLAY_ALPHA

    d = path_data(path)
    fill_rule = path.fill_rule if path is not None else config.FILL_RULE

    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'xmlns:xlink="http://www.w3.org/1999/xlink" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
    ]

    image_tag = ""
    if image is not None:
        data_uri_escaped = html.escape(image_data_uri(image), quote=True)
        image_tag = (
            f'<image x="0" y="0" width="{width}" height="{height}" '
            f'xlink:href="{data_uri_escaped}"'
        )

    if mode == "overlay":
        if image_tag:
            svg_parts.append(image_tag + " />")
        if d:
            svg_parts.append(
                f'<path data-mode="overlay" d="{d}" fill-rule="{fill_rule}" '
                f'fill="{overlay_color}" fill-opacity="{overlay_alpha}" stroke="none" />'
            )
    else:
        svg_parts.append(
            f'<defs><clipPath id="selection">'
            f'<path d="{d}" clip-rule="{fill_rule}" />'
            f'</clipPath></defs>'
        )
        if image_tag:
            svg_parts.append(image_tag + ' clip-path="url(#selection)" />')
        elif d:
            svg_parts.append(
                f'<path data-mode="cutout" d="{d}" fill-rule="{fill_rule}" fill="#000000" />'
            )

    svg_parts.append("</svg>")
    return "".join(svg_parts)


# ==========================
# RASTER
# ==========================

def rasterize_path(path: Optional[VectorPath], width: int, height: int) -> np.ndarray:
    """
    Boolean (height, width) coverage of a path, sampled at pixel centres.

    Winding numbers are accumulated per contour (outer +1, hole -1) and
    resolved with the path's fill rule.
    """
    winding = np.zeros((height, width), dtype=np.int32)
    if path is None:
        return winding.astype(bool)

    for contour in path.contours:
        pts = np.asarray(contour.points, dtype=np.float64)
        if len(pts) < 3:
            continue

        x0 = max(0, int(np.floor(pts[:, 0].min())))
        x1 = min(width, int(np.ceil(pts[:, 0].max())))
        y0 = max(0, int(np.floor(pts[:, 1].min())))
        y1 = min(height, int(np.ceil(pts[:, 1].max())))
        if x0 >= x1 or y0 >= y1:
            continue

        ys, xs = np.mgrid[y0:y1, x0:x1]
        centres = np.column_stack([xs.ravel() + 0.5, ys.ravel() + 0.5])
        inside = MplPath(pts, closed=False).contains_points(centres).reshape(y1 - y0, x1 - x0)
        winding[y0:y1, x0:x1] += np.where(inside, -1 if contour.hole else 1, 0)

    if path.fill_rule == "evenodd":
        return (winding % 2) == 1
    return winding != 0


def render_overlay(
    image: ImageSource,
    path: Optional[VectorPath],
    canvas_scale: float,
    overlay_color: Optional[str] = None,
    overlay_alpha: Optional[float] = None,
) -> Image.Image:
    """Image at canvas size with the selection tinted."""
    if overlay_color is None:
        overlay_color = config.OVERLAY_COLOR
    if overlay_alpha is None:
        overlay_alpha = config.OVERLAY_ALPHA

    image = load_image(image)
    size = canvas_size(image_extent(image), canvas_scale)
    base = np.asarray(image.convert("RGB").resize(size), dtype=np.float32)
    mask = rasterize_path(path, size[0], size[1])

    tint = np.array(Image.new("RGB", (1, 1), overlay_color).getpixel((0, 0)), dtype=np.float32)
    base[mask] = base[mask] * (1.0 - overlay_alpha) + tint * overlay_alpha
    return Image.fromarray(np.clip(base, 0, 255).astype("uint8"), "RGB")


def render_cutout(image: ImageSource, path: Optional[VectorPath], canvas_scale: float) -> Image.Image:
    """Image at canvas size with everything outside the selection transparent."""
    image = load_image(image)
    size = canvas_size(image_extent(image), canvas_scale)
    rgba = np.array(image.convert("RGBA").resize(size), dtype=np.uint8)
    mask = rasterize_path(path, size[0], size[1])
    rgba[..., 3] = np.where(mask, rgba[..., 3], 0)
    return Image.fromarray(rgba, "RGBA")
