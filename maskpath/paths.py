# maskpath/paths.py
"""
Contours -> one renderable vector path in canvas space.
"""

from typing import List, Optional, Sequence, Tuple

from . import config
from .contours import trace_contours
from .metrics import VECTORIZE_SECONDS
from .models import Contour, ProbabilityGrid, ScaleProfile, Space, VectorPath
from .transform import scale_between

FILL_RULES = ("nonzero", "evenodd")


def build_mask_path(
    contours: List[Contour],
    scale: float,
    fill_rule: Optional[str] = None,
) -> Optional[VectorPath]:
    """
    Scale every contour point uniformly and group the result into one path.

    Returns None for an empty contour list so callers render nothing.
    Winding is preserved, so holes survive either fill rule.
    """
    if fill_rule is None:
        fill_rule = config.FILL_RULE
    if fill_rule not in FILL_RULES:
        raise ValueError(f"fill_rule must be one of {FILL_RULES}, got {fill_rule!r}")
    if not contours:
        return None

    scaled = [
        Contour(points=[(x * scale, y * scale) for x, y in c.points], hole=c.hole)
        for c in contours
    ]
    return VectorPath(contours=scaled, fill_rule=fill_rule, scale=scale)


def build_grid_path(
    grid: ProbabilityGrid,
    profile: ScaleProfile,
    threshold: Optional[float] = None,
    fill_rule: Optional[str] = None,
) -> Optional[VectorPath]:
    """Trace a probability grid and place the result in canvas space."""
    with VECTORIZE_SECONDS.time():
        contours = trace_contours(grid, threshold)
        scale = scale_between(profile, Space.MASK_GRID, Space.CANVAS)
        return build_mask_path(contours, scale, fill_rule)


# ==========================
# SVG PATH DATA
# ==========================

def contour_to_svg_path(points: Sequence[Tuple[float, float]]) -> str:
    """Convert one closed point sequence to an SVG subpath."""
    if not points:
        return ""

    d_parts = []
    for i, (x, y) in enumerate(points):
        prefix = "M" if i == 0 else "L"
        d_parts.append(f"{prefix}{x:.2f} {y:.2f}")
    d_parts.append("Z")

    return " ".join(d_parts)


def path_data(path: Optional[VectorPath]) -> str:
    """SVG `d` attribute for a whole path; empty for no path."""
    if path is None:
        return ""
    return " ".join(filter(None, (contour_to_svg_path(c.points) for c in path.contours)))

