# maskpath/sam_feeds.py
"""
Helpers for driving a SAM-style ONNX mask decoder with a ModelRequest.
"""

import base64
from typing import Dict, Optional, Sequence

import cv2
import numpy as np

from . import config
from .errors import DimensionMismatch
from .models import ModelRequest, ScaleProfile


def decode_embedding(b64: str, shape: Optional[Sequence[int]] = None) -> np.ndarray:
    """
    Decode a base64 float32 buffer into an image embedding tensor.

    Accepts either raw base64 or a data URI.
    """
    if shape is None:
        shape = config.EMBEDDING_SHAPE
    header, _, payload = b64.partition(",")
    if payload == "":
        payload = header
    data = np.frombuffer(base64.b64decode(payload), dtype=np.float32)

    expected = int(np.prod(shape))
    if data.size != expected:
        raise DimensionMismatch(tuple(shape), (data.size,))
    return data.reshape(tuple(shape))


def prepare_model_input(image_np: np.ndarray, profile: ScaleProfile) -> np.ndarray:
    """Resize an original-resolution image to model-input resolution."""
    w = max(1, int(round(profile.width * profile.upload_scale)))
    h = max(1, int(round(profile.height * profile.upload_scale)))
    interpolation = cv2.INTER_AREA if profile.upload_scale < 1.0 else cv2.INTER_LINEAR
    return cv2.resize(image_np, (w, h), interpolation=interpolation)


def empty_mask_input() -> np.ndarray:
    size = config.SAM_MASK_INPUT_SIZE
    return np.zeros((1, 1, size, size), dtype=np.float32)


def build_sam_feeds(request: ModelRequest) -> Optional[Dict[str, np.ndarray]]:
    """
    Build decoder inputs from a request.

    Click coordinates are already in model-input space. A padding point with
    label -1 is appended since no box prompt is sent. The previous mask, when
    present, becomes `mask_input` with `has_mask_input` set.

    Returns None when the request has no clicks.
    """
    if not request.clicks:
        return None

    n = len(request.clicks)
    point_coords = np.zeros((1, n + 1, 2), dtype=np.float32)
    point_labels = np.zeros((1, n + 1), dtype=np.float32)
    for i, click in enumerate(request.clicks):
        point_coords[0, i] = (click.x, click.y)
        point_labels[0, i] = click.label
    point_labels[0, n] = -1.0

    if request.previous_mask is not None:
        mask_input = np.asarray(request.previous_mask, dtype=np.float32)
        has_mask_input = np.array([1.0], dtype=np.float32)
    else:
        mask_input = empty_mask_input()
        has_mask_input = np.array([0.0], dtype=np.float32)

    feeds = {
        "point_coords": point_coords,
        "point_labels": point_labels,
        "mask_input": mask_input,
        "has_mask_input": has_mask_input,
        "orig_im_size": np.array(
            [request.scale.mask_height, request.scale.mask_width], dtype=np.float32
        ),
    }
    if request.embedding is not None:
        feeds["image_embeddings"] = np.asarray(request.embedding, dtype=np.float32)
    return feeds
