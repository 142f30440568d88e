"""
Accounts Authentication - Bearer token issuing and validation.

This module implements:
- Access token issuing for registered/logged-in users
- Bearer token authentication that fails closed: any signature, expiry or
  payload problem is reported as an invalid token, and a token whose user
  has been deleted is reported as revoked
"""

import logging
from typing import Optional, Tuple

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken, Token

from api.exceptions import InvalidTokenError, UserRevokedError

logger = logging.getLogger(__name__)

User = get_user_model()


# =============================================================================
# TOKEN ISSUING
# =============================================================================

def issue_token(user) -> str:
    """Return a signed, time-limited bearer token bound to ``user``."""
    return str(AccessToken.for_user(user))


# =============================================================================
# BEARER TOKEN AUTHENTICATION
# =============================================================================

class BearerTokenAuthentication(JWTAuthentication):
    """
    JWT bearer authentication for the marketplace API.

    Resolves ``Authorization: Bearer <token>`` to a User. Requests without
    the header stay anonymous so that permission classes can answer with
    a 401 "not logged in" error.
    """

    def authenticate(self, request: Request) -> Optional[Tuple[User, Token]]:
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_validated_token(self, raw_token: bytes) -> Token:
        try:
            return super().get_validated_token(raw_token)
        except (InvalidToken, TokenError) as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise InvalidTokenError() from exc

    def get_user(self, validated_token: Token) -> User:
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError as exc:
            raise InvalidTokenError() from exc

        try:
            user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except (User.DoesNotExist, DjangoValidationError, ValueError) as exc:
            logger.info("Token for missing user %s", user_id)
            raise UserRevokedError() from exc

        if not user.is_active:
            raise UserRevokedError()

        return user
