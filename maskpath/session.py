# maskpath/session.py
"""
Refinement state machine for one selection on one image.

The session owns the click history and every mask the model has returned for
it. Commands (`add_click`, `undo`, `clear`) mutate that history; the single
event (`on_mask_received`) accepts a mask only if it was requested for the
click list as it stands now.

Step ids are click serials: each click gets the next value of a monotonically
increasing counter, and the current step id is the serial of the last click
(0 when empty). A step id therefore names exactly one click-list prefix, even
across undo followed by a new click.
"""

import itertools
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from . import config
from .errors import RefinementFailed
from .metrics import CLICKS_ADDED, MASKS_ACCEPTED, MASKS_DISCARDED, REFINEMENTS_FAILED, UNDOS
from .models import (
    FOREGROUND,
    Click,
    ImageExtent,
    ModelRequest,
    Point,
    ProbabilityGrid,
    Space,
    VectorPath,
)
from .paths import build_grid_path
from .transform import compute_scale_profile, transform


class SessionState(str, Enum):
    EMPTY = "empty"
    REFINING = "refining"


class _CachedMask:
    __slots__ = ("grid", "mask_state")

    def __init__(self, grid: ProbabilityGrid, mask_state: Any = None):
        self.grid = grid
        self.mask_state = mask_state


class RefinementSession:
    def __init__(
        self,
        extent: ImageExtent,
        canvas_scale: float = 1.0,
        embedding: Any = None,
        threshold: Optional[float] = None,
        fill_rule: Optional[str] = None,
    ):
        self._extent = extent
        self._profile = compute_scale_profile(extent, canvas_scale)
        self._embedding = embedding
        self._threshold = config.MASK_THRESHOLD if threshold is None else threshold
        self._fill_rule = fill_rule

        self._serials = itertools.count(1)
        self._clicks: Tuple[Click, ...] = ()
        self._masks: Dict[int, _CachedMask] = {}
        self._grid: Optional[ProbabilityGrid] = None
        self._path: Optional[VectorPath] = None

    # ==========================
    # READ-ONLY VIEWS
    # ==========================

    @property
    def profile(self):
        return self._profile

    @property
    def clicks(self) -> Tuple[Click, ...]:
        return self._clicks

    @property
    def state(self) -> SessionState:
        return SessionState.REFINING if self._clicks else SessionState.EMPTY

    @property
    def step_id(self) -> int:
        return self._clicks[-1].serial if self._clicks else 0

    @property
    def grid(self) -> Optional[ProbabilityGrid]:
        return self._grid

    @property
    def path(self) -> Optional[VectorPath]:
        return self._path

    @property
    def pending(self) -> bool:
        """True while the current step's mask has not arrived."""
        return bool(self._clicks) and self.step_id not in self._masks

    # ==========================
    # COMMANDS
    # ==========================

    def add_click(self, canvas_point: Point, label: int = FOREGROUND) -> Tuple[ModelRequest, int]:
        """
        Append a click given in canvas space and build the model request.

        The request carries the full click list in model-input space plus the
        newest mask state that has arrived for any step still in the list.
        """
        p = transform(canvas_point, Space.CANVAS, Space.MODEL_INPUT, self._profile)
        previous = self._latest_mask()

        click = Click(x=p.x, y=p.y, label=label, serial=next(self._serials))
        self._clicks = self._clicks + (click,)
        CLICKS_ADDED.inc()

        request = ModelRequest(
            step_id=click.serial,
            clicks=list(self._clicks),
            previous_mask=previous.mask_state if previous is not None else None,
            scale=self._profile,
            embedding=self._embedding,
        )
        return request, click.serial

    def undo(self) -> Tuple[Optional[VectorPath], int]:
        """
        Drop the last click and re-display the mask cached for the new last step.

        The path is cleared when the list becomes empty or when the prior
        step's mask never arrived.
        """
        if not self._clicks:
            return None, 0

        removed = self._clicks[-1]
        self._clicks = self._clicks[:-1]
        self._masks.pop(removed.serial, None)
        UNDOS.inc()

        cached = self._masks.get(self.step_id) if self._clicks else None
        if cached is None:
            self._grid = None
            self._path = None
        else:
            self._show(cached.grid)
        return self._path, self.step_id

    def clear(self) -> None:
        self._clicks = ()
        self._masks.clear()
        self._grid = None
        self._path = None

    def set_canvas_scale(self, canvas_scale: float) -> Optional[VectorPath]:
        """Rebuild the displayed path after the canvas was resized."""
        self._profile = compute_scale_profile(self._extent, canvas_scale)
        if self._grid is not None:
            self._show(self._grid)
        return self._path

    # ==========================
    # EVENTS
    # ==========================

    def on_mask_received(
        self,
        step_id: int,
        grid: ProbabilityGrid,
        mask_state: Any = None,
    ) -> Optional[VectorPath]:
        """
        Accept a mask for the current step and rebuild the path.

        Results for any other step are stale and return None without touching
        session state.
        """
        if not self._clicks or step_id != self.step_id:
            MASKS_DISCARDED.inc()
            return None

        path = self._show(grid)
        self._masks[step_id] = _CachedMask(grid, mask_state)
        MASKS_ACCEPTED.inc()
        return path

    def on_mask_failed(self, step_id: int, cause: Optional[BaseException] = None) -> RefinementFailed:
        """Record a failed request; clicks and the last good mask stay as they are."""
        REFINEMENTS_FAILED.inc()
        return RefinementFailed(step_id, str(cause) if cause is not None else None)

    def _latest_mask(self) -> Optional[_CachedMask]:
        for click in reversed(self._clicks):
            cached = self._masks.get(click.serial)
            if cached is not None:
                return cached
        return None

    def _show(self, grid: ProbabilityGrid) -> Optional[VectorPath]:
        path = build_grid_path(grid, self._profile, self._threshold, self._fill_rule)
        self._grid = grid
        self._path = path
        return path
