import logging

from analytics.middleware import client_ip

logger = logging.getLogger("auth")


def log_auth_event(action: str, request, user=None, status: str = "success", extra: dict | None = None):
    """Log an auth event as `auth_<action>` with the caller's uid, role and ip as extras."""
    fields = {
        "event": f"auth_{action}",
        "status": status,
        "ip": client_ip(request),
        "firebase_uid": request.META.get("HTTP_X_FIREBASE_UID"),
    }
    if user is not None:
        fields["user_id"] = getattr(user, "id", None)
        fields["role"] = getattr(user, "role", None)
    fields.update(extra or {})
    logger.info(fields["event"], extra=fields)
