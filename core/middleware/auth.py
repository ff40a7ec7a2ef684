"""
Admin secret authentication middleware.

This middleware guards key issuance and the admin endpoints with a
shared secret checked against a stored password hash.
"""

import json
import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth.hashers import check_password
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import AuthFailureError

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int) -> JsonResponse:
    """Build a JSON error envelope."""
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


def unauthorized(exc: AuthFailureError) -> JsonResponse:
    """Build the 401 response for a failed credential check."""
    return error_response(exc.code, exc.message, 401)


class AdminSecretAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin secret authentication.

    This middleware:
    1. Applies to /generateKey and every /admin/ path
    2. Reads the secret from the Admin-Secret header or the admin_secret body field
    3. Returns 401 if the secret is missing or wrong, 500 if no hash is configured
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin secret.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with an error if authentication fails, None otherwise
        """
        if not self._is_protected(request.path):
            return None

        secret_hash = getattr(settings, "ADMIN_SECRET_HASH", "")
        if not secret_hash:
            logger.error("ADMIN_SECRET_HASH is not configured")
            return error_response(
                "SERVER_MISCONFIGURED", "Admin authentication is not configured", 500
            )

        secret = self._extract_secret(request)
        if not secret:
            return unauthorized(AuthFailureError("Admin secret required"))

        if not check_password(secret, secret_hash):
            logger.warning(
                "Invalid admin secret attempted",
                extra={"path": request.path, "remote_addr": request.META.get("REMOTE_ADDR")},
            )
            return unauthorized(AuthFailureError())

        request.is_admin = True  # type: ignore
        return None

    def _is_protected(self, path: str) -> bool:
        """
        Check if the path requires the admin secret.

        Args:
            path: Request path

        Returns:
            True if auth is required
        """
        protected = getattr(settings, "ADMIN_PROTECTED_PATHS", ["/generateKey", "/admin/"])
        return any(path == prefix or path.startswith(prefix) for prefix in protected)

    def _extract_secret(self, request: HttpRequest) -> Optional[str]:
        """Read the secret from the header, falling back to the JSON body."""
        header = getattr(settings, "ADMIN_SECRET_HEADER", "Admin-Secret")
        secret = request.headers.get(header)
        if secret:
            return secret

        if not request.body or "json" not in (request.content_type or ""):
            return None
        try:
            body = json.loads(request.body)
        except (ValueError, UnicodeDecodeError):
            return None
        if isinstance(body, dict) and isinstance(body.get("admin_secret"), str):
            return body["admin_secret"]
        return None
