# maskpath/metrics.py
"""
Prometheus metrics for the refinement loop.

Registered on the default registry; exposing them is left to the host process.
"""

from prometheus_client import Counter, Gauge, Histogram

# Clicks appended to a session
CLICKS_ADDED = Counter(
    "maskpath_clicks_added_total",
    "Total number of refinement clicks added",
)

UNDOS = Counter(
    "maskpath_undos_total",
    "Total number of undo operations that removed a click",
)

# Masks by outcome on arrival
MASKS_ACCEPTED = Counter(
    "maskpath_masks_accepted_total",
    "Total number of masks accepted for the current step",
)

MASKS_DISCARDED = Counter(
    "maskpath_masks_discarded_total",
    "Total number of stale masks discarded on arrival",
)

REFINEMENTS_FAILED = Counter(
    "maskpath_refinements_failed_total",
    "Total number of model requests that raised",
)

# Model requests awaiting a response
REQUESTS_IN_FLIGHT = Gauge(
    "maskpath_requests_in_flight",
    "Number of model requests not yet answered",
)

# Time spent turning a grid into a vector path
VECTORIZE_SECONDS = Histogram(
    "maskpath_vectorize_seconds",
    "Time spent tracing and scaling a mask into a vector path in seconds",
)
