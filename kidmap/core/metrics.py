"""
Prometheus metrics
"""

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "kidmap_requests_total",
    "Total requests",
    ["method", "endpoint", "status"]
)

REQUEST_DURATION = Histogram(
    "kidmap_request_duration_seconds",
    "Request duration",
    ["method", "endpoint"]
)

UPSTREAM_REQUESTS = Counter(
    "kidmap_upstream_requests_total",
    "Calls to third-party providers",
    ["provider", "outcome"]
)

UPSTREAM_DURATION = Histogram(
    "kidmap_upstream_request_duration_seconds",
    "Third-party provider latency",
    ["provider"]
)

UNMATCHED_CATEGORY = Counter(
    "kidmap_unmatched_category_total",
    "Geodata elements whose tags matched no venue category"
)
