import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from .models import Visitor

logger = logging.getLogger("storefront.analytics")


def track_visitor(*, ip_address: str, user_agent: str = "") -> None:
    """Record a visit from `ip_address`, creating the row on first sight."""

    user_agent = (user_agent or "")[:512]
    fields = {"visit_count": F("visit_count") + 1, "last_visit": timezone.now(), "user_agent": user_agent}
    if Visitor.objects.filter(ip_address=ip_address).update(**fields):
        return
    try:
        with transaction.atomic():
            Visitor.objects.create(ip_address=ip_address, user_agent=user_agent)
    except IntegrityError:
        Visitor.objects.filter(ip_address=ip_address).update(**fields)
