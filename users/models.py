"""User models for authentication and role-based access.

Identity is owned by the upstream provider (Firebase). The local `User`
row links a Firebase uid to an application role and a normalized email.
"""

from common.choices import UserRole
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user keyed to a Firebase uid with an application role.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - firebase_uid: identifier issued by the upstream identity provider.
    - role: `customer` or `admin`; admins manage catalog and order status.
    """

    ROLE_CUSTOMER = UserRole.CUSTOMER
    ROLE_ADMIN = UserRole.ADMIN
    ROLE_CHOICES = UserRole.choices

    email = models.EmailField(unique=True)
    firebase_uid = models.CharField(max_length=128, unique=True, null=True, blank=True)
    name = models.CharField(max_length=150, blank=True)
    profile_image = models.URLField(max_length=500, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_CUSTOMER, db_index=True)

    def save(self, *args, **kwargs):
        """Normalize email and uid before persisting so uniqueness checks are reliable."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.firebase_uid:
            self.firebase_uid = self.firebase_uid.strip()
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN or bool(self.is_staff)

    def __str__(self) -> str:  # pragma: no cover
        return self.email or self.username
