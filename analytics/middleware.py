"""Best-effort visitor tracking for storefront page requests."""

import logging

from django.db import DatabaseError

from .services import track_visitor

logger = logging.getLogger("storefront.analytics")

SKIP_PREFIXES = ("/api/", "/admin/", "/static/", "/media/", "/health")


def client_ip(request) -> str | None:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR")


def is_trackable(request) -> bool:
    if request.method != "GET":
        return False
    path = request.path
    if path.startswith(SKIP_PREFIXES):
        return False
    # Assets such as /favicon.ico or /assets/app.js
    return "." not in path.rsplit("/", 1)[-1]


class VisitorTrackingMiddleware:
    """Count page views per client IP.

    Tracking never affects the response: database errors are logged and the
    request continues.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if is_trackable(request):
            ip = client_ip(request)
            if ip:
                try:
                    track_visitor(ip_address=ip, user_agent=request.META.get("HTTP_USER_AGENT", ""))
                except DatabaseError as exc:
                    logger.warning(
                        "visitor_tracking_failed",
                        extra={"event": "visitor_tracking_failed", "path": request.path, "error": str(exc)},
                    )
        return self.get_response(request)
