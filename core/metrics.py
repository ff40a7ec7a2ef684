"""
Prometheus metrics for the key service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Key metrics
keys_issued_total = Counter(
    "keys_issued_total",
    "Total keys issued",
)

key_generation_collisions_total = Counter(
    "key_generation_collisions_total",
    "Generated key strings rejected by the uniqueness constraint",
)

activations_total = Counter(
    "activations_total",
    "Activate calls by outcome",
    ["outcome"],
)

verifications_total = Counter(
    "verifications_total",
    "Verify calls by outcome",
    ["outcome"],
)

# Janitor metrics
janitor_sweeps_total = Counter(
    "janitor_sweeps_total",
    "Janitor sweeps by result",
    ["result"],
)

keys_expired_total = Counter(
    "keys_expired_total",
    "Keys transitioned to expired by the janitor",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
