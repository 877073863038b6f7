# maskpath/worker.py
"""
Async glue between a RefinementSession and the model collaborator.

Requests are never cancelled; a response that arrives after the click list
has moved on is dropped by the session's step-id check.
"""

import asyncio
from typing import Optional, Protocol

from .logger import console
from .metrics import REQUESTS_IN_FLIGHT
from .models import FOREGROUND, ModelRequest, ModelResponse, Point, VectorPath
from .session import RefinementSession


class MaskPredictor(Protocol):
    async def predict(self, request: ModelRequest) -> ModelResponse:
        ...


async def process_request(
    session: RefinementSession,
    predictor: MaskPredictor,
    request: ModelRequest,
) -> Optional[VectorPath]:
    """
    Await one prediction and hand the result to the session.

    Args:
        session: Session that issued the request
        predictor: Model collaborator
        request: Request returned by `session.add_click`

    Returns:
        The rebuilt path, or None if the result was stale or empty

    Raises:
        RefinementFailed: the predictor raised; session state is left unchanged
    """
    step_id = request.step_id
    console.log(f"[blue]Requesting mask for step {step_id} ({len(request.clicks)} clicks)[/blue]")

    REQUESTS_IN_FLIGHT.inc()
    try:
        response = await predictor.predict(request)
    except Exception as e:
        console.log(f"[red]Step {step_id} failed: {e}[/red]")
        raise session.on_mask_failed(step_id, e) from e
    finally:
        REQUESTS_IN_FLIGHT.dec()

    if step_id != session.step_id:
        console.log(f"[dim]Discarding stale mask for step {step_id} (current {session.step_id})[/dim]")

    path = session.on_mask_received(step_id, response.grid, response.mask_state)
    if path is not None:
        console.log(f"[green]Step {step_id} done. {len(path.contours)} contours.[/green]")
    return path


def submit_click(
    session: RefinementSession,
    predictor: MaskPredictor,
    canvas_point: Point,
    label: int = FOREGROUND,
) -> "asyncio.Task[Optional[VectorPath]]":
    """
    Add a click and schedule its prediction on the running loop.

    Returns:
        Task resolving to the path for this step (None if stale)
    """
    request, _ = session.add_click(canvas_point, label)
    loop = asyncio.get_running_loop()
    return loop.create_task(process_request(session, predictor, request))
