# maskpath/config.py
"""
Configuration constants for scaling, thresholding and overlay styling.

Every value can be overridden through the environment before import.
"""

import os

# ==========================
# SCALING
# ==========================

# Longest side of the image handed to the model's image encoder
UPLOAD_IMAGE_SIZE = int(os.getenv("MASKPATH_UPLOAD_IMAGE_SIZE", "1024"))

# Shortest side of the predicted probability grid
PREVIEW_IMAGE_SIZE = int(os.getenv("MASKPATH_PREVIEW_IMAGE_SIZE", "500"))

# Absolute ceiling for the longest side of the probability grid
PREVIEW_MAX_SIZE = int(os.getenv("MASKPATH_PREVIEW_MAX_SIZE", "1333"))

# ==========================
# MASK DECODING
# ==========================

# SAM decoders emit raw logits; foreground is strictly above 0.0.
# Use 0.5 for collaborators that emit normalized probabilities.
MASK_THRESHOLD = float(os.getenv("MASKPATH_MASK_THRESHOLD", "0.0"))

# Low-res mask fed back to the decoder as previous-mask context
SAM_MASK_INPUT_SIZE = int(os.getenv("MASKPATH_SAM_MASK_INPUT_SIZE", "256"))

# Image embedding produced by the encoder
EMBEDDING_SHAPE = tuple(
    int(v) for v in os.getenv("MASKPATH_EMBEDDING_SHAPE", "1,256,64,64").split(",")
)

# ==========================
# RENDERING
# ==========================

FILL_RULE = os.getenv("MASKPATH_FILL_RULE", "nonzero")
OVERLAY_COLOR = os.getenv("MASKPATH_OVERLAY_COLOR", "#0000ff")
OVERLAY_ALPHA = float(os.getenv("MASKPATH_OVERLAY_ALPHA", "0.4"))
