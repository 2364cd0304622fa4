"""
Cookie based JWT authentication.

The login endpoint stores the access token in an HTTP-only cookie. Browsers
send it back automatically, so every API request is verified against the
shared signing key without the frontend ever touching the token.
"""

import logging

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    Read the access token from the session cookie.

    A missing, expired or tampered cookie is treated as "no credentials" so
    the next authentication class (Authorization header, session) still
    gets its turn and anonymous endpoints such as login keep working.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.SESSION_TOKEN_COOKIE)
        if not raw_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_token.encode())
            user = self.get_user(validated_token)
        except (InvalidToken, AuthenticationFailed) as e:
            logger.debug("Ignoring unusable session cookie: %s", e)
            return None

        if not user.is_active:
            return None

        return user, validated_token

    def authenticate_header(self, request):
        return 'Bearer realm="api"'


def set_session_cookie(response, access_token):
    """Attach the signed access token to the response as the session cookie."""
    response.set_cookie(
        settings.SESSION_TOKEN_COOKIE,
        str(access_token),
        max_age=settings.SESSION_TOKEN_MAX_AGE,
        httponly=True,
        secure=not settings.DEBUG,
        samesite='Lax',
        path='/',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(settings.SESSION_TOKEN_COOKIE, path='/', samesite='Lax')
    return response
