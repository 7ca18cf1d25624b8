"""Serializers for the current user, registration and admin role management.

- UserMeSerializer: profile data for the authenticated user.
- RegistrationSerializer: links the forwarded Firebase uid to a local user.
- UserRoleSerializer: admin-only role changes.
"""

from rest_framework import serializers

from .models import User


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning profile fields for the current user."""

    class Meta:
        model = User
        fields = ["id", "email", "name", "profile_image", "role", "firebase_uid", "date_joined"]
        read_only_fields = ["id", "email", "role", "firebase_uid", "date_joined"]


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register the caller's Firebase identity.

    The uid is taken from the request headers, never from the body.
    """

    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    profile_image = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate_email(self, value: str) -> str:
        """Normalize and ensure the email is not taken by another uid."""
        value = value.strip().lower()
        uid = self.context.get("firebase_uid")
        if User.objects.filter(email=value).exclude(firebase_uid=uid).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value


class AdminUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "role", "is_active", "date_joined"]
        read_only_fields = fields


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
