# maskpath/__init__.py
"""Click-driven mask refinement and mask-to-vector-path tracing."""

from .contours import threshold_grid, trace_contours, trace_mask
from .errors import DimensionMismatch, InvalidExtent, MaskPathError, RefinementFailed
from .models import (
    BACKGROUND,
    FOREGROUND,
    Click,
    Contour,
    ImageExtent,
    ModelRequest,
    ModelResponse,
    Point,
    ProbabilityGrid,
    ScaleProfile,
    Space,
    VectorPath,
)
from .paths import build_grid_path, build_mask_path, path_data
from .session import RefinementSession, SessionState
from .transform import (
    compute_scale_profile,
    fit_canvas_scale,
    scale_between,
    transform,
    transform_extent,
    transform_points,
)
from .worker import MaskPredictor, process_request, submit_click

__version__ = "1.0.0"
