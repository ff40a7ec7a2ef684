"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError, IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthFailureError,
    DomainException,
    GenerationExhaustedError,
    InvalidInputError,
    NotFoundError,
    UnavailableError,
    UniqueViolationError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

DOMAIN_STATUS_CODES = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UniqueViolationError, status.HTTP_409_CONFLICT),
    (GenerationExhaustedError, status.HTTP_409_CONFLICT),
    (AuthFailureError, status.HTTP_401_UNAUTHORIZED),
    (UnavailableError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, IntegrityError):
        exc = UniqueViolationError("Request conflicts with existing data")
    elif isinstance(exc, DatabaseError):
        logger.error("Database error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
        exc = UnavailableError("Database unavailable")

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, ValidationError):
        response = _handle_validation_error(exc, context)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        detail = response.data.get("detail", exc.default_detail)
        response.data = {"error": {"code": code, "message": str(detail)}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else "unknown"


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status.HTTP_400_BAD_REQUEST
    for exc_type, mapped in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            status_code = mapped
            break

    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_validation_error(exc: ValidationError, context: Dict[str, Any]) -> Response:
    """Render serializer errors as INVALID_INPUT with the first message."""
    errors_total.labels(error_type="INVALID_INPUT", endpoint=_endpoint(context)).inc()
    return Response(
        {
            "error": {
                "code": "INVALID_INPUT",
                "message": _first_message(exc.detail),
                "details": exc.detail,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            return message if field == "non_field_errors" else f"{field}: {message}"
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type="INTERNAL_ERROR", endpoint=_endpoint(context)).inc()
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
