# maskpath/errors.py
from typing import Optional


class MaskPathError(Exception):
    """Base class for every error raised by maskpath."""


class DimensionMismatch(MaskPathError):
    """Array data does not match its declared dimensions."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected}, got {actual}")


class InvalidExtent(MaskPathError):
    """Image extent or scale is non-finite or not positive."""


class RefinementFailed(MaskPathError):
    """The model collaborator failed to produce a mask for a step."""

    def __init__(self, step_id: int, reason: Optional[str] = None):
        self.step_id = step_id
        message = f"refinement step {step_id} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
