"""
Request origin helpers.
"""
from django.http import HttpRequest

from core.domain.value_objects import ClientInfo


def get_client_ip(request: HttpRequest):
    """Return the first hop of X-Forwarded-For, else REMOTE_ADDR."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.META.get("REMOTE_ADDR")


def get_client_info(request: HttpRequest) -> ClientInfo:
    """Build the ClientInfo recorded in the activity log."""
    return ClientInfo(
        ip_address=get_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT") or None,
    )
