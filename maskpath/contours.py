# maskpath/contours.py
"""
Probability grid -> closed boundary contours.

Pixel (x, y) covers the square [x, x+1] x [y, y+1]; contour vertices are
integer pixel corners. Outer boundaries wind clockwise on screen (y down,
positive shoelace area) and hole boundaries counter-clockwise, so both the
nonzero and even-odd fill rules leave holes empty. Pixels touching only at a
corner end up in separate loops.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

import numpy as np

from . import config
from .errors import DimensionMismatch
from .models import Contour, ProbabilityGrid

Vertex = Tuple[int, int]
Direction = Tuple[int, int]

RIGHT: Direction = (1, 0)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
UP: Direction = (0, -1)


# ==========================
# THRESHOLDING
# ==========================

def threshold_grid(grid: ProbabilityGrid, threshold: Optional[float] = None) -> np.ndarray:
    """
    Binarize a grid into an (H, W) boolean mask (value > threshold).

    Accepts flat data or arrays whose trailing axes are (height, width).
    """
    if threshold is None:
        threshold = config.MASK_THRESHOLD

    values = np.asarray(grid.values)
    expected = (grid.height, grid.width)

    if values.size != grid.width * grid.height:
        raise DimensionMismatch(expected, values.shape)
    if values.ndim >= 2 and tuple(values.shape[-2:]) != expected:
        raise DimensionMismatch(expected, values.shape)

    return values.reshape(expected) > threshold


# ==========================
# BOUNDARY EDGES
# ==========================

def _boundary_edges(mask: np.ndarray) -> Tuple[Dict[Vertex, List[Direction]], List[Vertex]]:
    """
    Directed boundary edges keyed by start vertex, plus the start vertices of
    all top edges in raster order.

    Each edge keeps the foreground on its right-hand side (screen space).
    """
    padded = np.pad(mask, 1, mode="constant", constant_values=False)
    inner = padded[1:-1, 1:-1]

    top = inner & ~padded[:-2, 1:-1]
    bottom = inner & ~padded[2:, 1:-1]
    left = inner & ~padded[1:-1, :-2]
    right = inner & ~padded[1:-1, 2:]

    outgoing: Dict[Vertex, List[Direction]] = defaultdict(list)

    ys, xs = np.nonzero(top)
    top_starts = list(zip(xs.tolist(), ys.tolist()))
    for v in top_starts:
        outgoing[v].append(RIGHT)

    ys, xs = np.nonzero(right)
    for x, y in zip(xs.tolist(), ys.tolist()):
        outgoing[(x + 1, y)].append(DOWN)

    ys, xs = np.nonzero(bottom)
    for x, y in zip(xs.tolist(), ys.tolist()):
        outgoing[(x + 1, y + 1)].append(LEFT)

    ys, xs = np.nonzero(left)
    for x, y in zip(xs.tolist(), ys.tolist()):
        outgoing[(x, y + 1)].append(UP)

    return outgoing, top_starts


def _next_direction(d: Direction, options: List[Direction]) -> Optional[Direction]:
    # Right turn first keeps diagonal-only neighbours apart.
    dx, dy = d
    for cand in ((-dy, dx), (dx, dy), (dy, -dx)):
        if cand in options:
            return cand
    return None


def _walk_loop(outgoing: Dict[Vertex, List[Direction]], start: Vertex) -> List[Vertex]:
    """Follow boundary edges from a top edge at `start` until the loop closes."""
    outgoing[start].remove(RIGHT)
    vertices = [start]
    dirs = [RIGHT]

    x, y = start
    d = RIGHT
    while True:
        x += d[0]
        y += d[1]
        v = (x, y)
        options = outgoing.get(v, [])
        if v == start:
            options = options + [RIGHT]

        nd = _next_direction(d, options)
        if nd is None:
            raise RuntimeError(f"open boundary at vertex {v}")
        if v == start and nd == RIGHT:
            break

        outgoing[v].remove(nd)
        vertices.append(v)
        dirs.append(nd)
        d = nd

    # Keep only corners
    return [vertices[i] for i in range(len(vertices)) if dirs[i - 1] != dirs[i]]


def _signed_area(points: List[Vertex]) -> float:
    pts = np.asarray(points, dtype=np.float64)
    x, y = pts[:, 0], pts[:, 1]
    return float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0


# ==========================
# CONTOUR EXTRACTION
# ==========================

def trace_mask(mask: np.ndarray) -> List[Contour]:
    """Trace every boundary loop of a boolean (H, W) mask."""
    mask = np.asarray(mask, dtype=bool)
    if mask.ndim != 2:
        raise ValueError("mask must be a 2D array")
    if not mask.any():
        return []

    outgoing, top_starts = _boundary_edges(mask)

    contours: List[Contour] = []
    for start in top_starts:
        if RIGHT not in outgoing[start]:
            continue  # already part of a traced loop
        corners = _walk_loop(outgoing, start)
        contours.append(Contour(points=corners, hole=_signed_area(corners) < 0))
    return contours


def trace_contours(grid: ProbabilityGrid, threshold: Optional[float] = None) -> List[Contour]:
    """
    Threshold a probability grid and trace its boundaries.

    Returns an empty list when nothing exceeds the threshold. Raises
    DimensionMismatch when the values disagree with the declared size.
    """
    return trace_mask(threshold_grid(grid, threshold))
