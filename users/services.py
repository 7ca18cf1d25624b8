"""User-related service functions.

Registration is an upsert keyed by the Firebase uid so that a client can
safely call it after every sign-in.
"""

from django.db import IntegrityError, transaction

from .models import User


def _username_for(uid: str) -> str:
    return f"fb_{uid}"[:150]


def register_firebase_user(*, firebase_uid: str, email: str, name: str = "", profile_image: str = "") -> tuple[User, bool]:
    """Return the user for `firebase_uid`, creating it when missing.

    Returns `(user, created)`.
    """

    try:
        return User.objects.get(firebase_uid=firebase_uid), False
    except User.DoesNotExist:
        pass
    try:
        with transaction.atomic():
            user = User(
                username=_username_for(firebase_uid),
                email=email,
                firebase_uid=firebase_uid,
                name=name or "",
                profile_image=profile_image or "",
            )
            # Credentials live with the identity provider
            user.set_unusable_password()
            user.save()
            return user, True
    except IntegrityError:
        # Concurrent registration for the same uid won the race
        user = User.objects.filter(firebase_uid=firebase_uid).first()
        if user is None:
            raise
        return user, False


def set_role(*, user: User, role: str) -> User:
    """Change a user's application role."""

    if role not in dict(User.ROLE_CHOICES):
        raise ValueError("Invalid role")
    user.role = role
    user.save(update_fields=["role"])
    return user
