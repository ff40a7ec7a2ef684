"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import (
    http_request_duration_seconds,
    http_requests_total,
)

NUMERIC_SEGMENT = re.compile(r"/\d+")


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()
        # Collapse key ids so /admin/keys/12/logs aggregates with the rest
        endpoint = NUMERIC_SEGMENT.sub("/{id}", request.path)

        try:
            response = self.get_response(request)
        except Exception:
            self._record(request.method, endpoint, 500, time.time() - start_time)
            raise

        self._record(request.method, endpoint, response.status_code, time.time() - start_time)
        return response

    @staticmethod
    def _record(method: str, endpoint: str, status_code: int, duration: float) -> None:
        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=status_code,
        ).inc()
        http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)
