"""DRF authentication backed by the upstream identity layer.

The gateway in front of the API verifies the Firebase ID token and forwards
the uid in `X-Firebase-Uid`. Requests must also carry a bearer token so that
unauthenticated browser requests never resolve to a user.
"""

from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions

UID_HEADER = "X-Firebase-Uid"


class FirebaseUidAuthentication(authentication.BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        uid = (request.headers.get(UID_HEADER) or "").strip()
        if not uid:
            return None
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode() or len(auth) != 2:
            raise exceptions.AuthenticationFailed("No token provided")

        User = get_user_model()
        try:
            user = User.objects.get(firebase_uid=uid)
        except User.DoesNotExist:
            raise exceptions.AuthenticationFailed("User not found")
        if not user.is_active:
            raise exceptions.AuthenticationFailed("User inactive")
        return user, uid

    def authenticate_header(self, request):
        return self.keyword


def firebase_uid_from_request(request) -> str | None:
    """Return the forwarded Firebase uid when a bearer token is also present."""

    uid = (request.headers.get(UID_HEADER) or "").strip()
    auth = authentication.get_authorization_header(request).split()
    if not uid or len(auth) != 2 or auth[0].lower() != b"bearer":
        return None
    return uid
