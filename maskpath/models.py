# maskpath/models.py
from enum import Enum
from typing import Any, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict


FOREGROUND = 1
BACKGROUND = 0


class Space(str, Enum):
    ORIGINAL = "original"
    MODEL_INPUT = "model_input"
    MASK_GRID = "mask_grid"
    CANVAS = "canvas"


class Point(BaseModel):
    x: float
    y: float


class Click(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    label: int = FOREGROUND
    serial: int = 0


class ImageExtent(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class ScaleProfile(BaseModel):
    """Scale factors of every coordinate space relative to the original image."""

    model_config = ConfigDict(frozen=True)

    width: float
    height: float
    upload_scale: float
    preview_scale: float
    onnx_scale: float
    canvas_scale: float = 1.0

    @property
    def mask_width(self) -> int:
        return int(round(self.width * self.preview_scale))

    @property
    def mask_height(self) -> int:
        return int(round(self.height * self.preview_scale))


class ProbabilityGrid(BaseModel):
    """Per-pixel mask values as emitted by the model collaborator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    values: np.ndarray
    width: int
    height: int

    @classmethod
    def from_array(cls, array: Any) -> "ProbabilityGrid":
        """Wrap a (..., H, W) tensor, e.g. the (1, 1, H, W) SAM decoder output."""
        values = np.asarray(array)
        if values.ndim < 2:
            raise ValueError("array must have at least two dimensions")
        height, width = values.shape[-2:]
        return cls(values=values, width=int(width), height=int(height))


class Contour(BaseModel):
    """Closed boundary loop in grid pixel-corner coordinates."""

    points: List[Tuple[float, float]]
    hole: bool = False

    @property
    def signed_area(self) -> float:
        """Shoelace area in y-down coordinates; positive for outer boundaries."""
        pts = self.points
        total = 0.0
        for i, (x0, y0) in enumerate(pts):
            x1, y1 = pts[(i + 1) % len(pts)]
            total += x0 * y1 - x1 * y0
        return total / 2.0


class VectorPath(BaseModel):
    contours: List[Contour]
    fill_rule: str = "nonzero"
    scale: float = 1.0


class ModelRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    step_id: int
    clicks: List[Click]
    previous_mask: Optional[Any] = None
    scale: ScaleProfile
    embedding: Optional[Any] = None


class ModelResponse(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    grid: ProbabilityGrid
    mask_state: Optional[Any] = None
