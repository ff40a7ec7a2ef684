"""
Core views for health checks, metrics and the service banner.
"""

import logging

from django.conf import settings
from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class RootView(View):
    """Service banner."""

    def get(self, _request):
        """Return the service name and version."""
        return JsonResponse(
            {
                "message": settings.SERVICE_NAME,
                "version": settings.SERVICE_VERSION,
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint, including database connectivity."""

    def get(self, _request):
        """Return service health status."""
        timestamp = timezone.now().isoformat()
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Health check failed: %s", e, exc_info=True)
            return JsonResponse(
                {
                    "status": "unhealthy",
                    "database": "disconnected",
                    "timestamp": timestamp,
                    "error": str(e),
                },
                status=503,
            )
        return JsonResponse(
            {"status": "healthy", "database": "connected", "timestamp": timestamp}
        )


@method_decorator(csrf_exempt, name="dispatch")
class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        """Return metrics in the Prometheus text format."""
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)


def not_found(request, exception=None):
    """Render unknown paths in the JSON error envelope."""
    return JsonResponse(
        {"error": {"code": "NOT_FOUND", "message": f"Route {request.path} not found"}},
        status=404,
    )


def server_error(request):
    """Render unhandled errors in the JSON error envelope."""
    return JsonResponse(
        {"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
        status=500,
    )
