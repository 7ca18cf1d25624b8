from django.db import models


class Visitor(models.Model):
    """One row per client IP; `visit_count` counts tracked page requests."""

    ip_address = models.GenericIPAddressField(unique=True)
    user_agent = models.CharField(max_length=512, blank=True)
    visit_count = models.PositiveIntegerField(default=1)
    first_visit = models.DateTimeField(auto_now_add=True)
    last_visit = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-last_visit"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Visitor {self.ip_address} ({self.visit_count})"
