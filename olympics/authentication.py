"""Bearer-token guard for administrative writes."""

from __future__ import annotations

import hmac

from django.conf import settings
from rest_framework import authentication, exceptions, permissions

KEYWORD = "Bearer"


class Operator:
    """Principal attached to requests carrying the admin token."""

    is_authenticated = True
    is_anonymous = False
    username = "operator"

    def __str__(self) -> str:
        return self.username


def configured_token() -> str:
    return getattr(settings, "OLYMPICS_ADMIN_TOKEN", "") or ""


def token_matches(candidate: str) -> bool:
    expected = configured_token()
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), expected.encode())


def bearer_token(request) -> str | None:
    """Token from ``Authorization: Bearer <token>``; ``None`` when absent.

    Raises ``AuthenticationFailed`` for a malformed Bearer header.
    """

    header = authentication.get_authorization_header(request).split()
    if not header or header[0].decode().lower() != KEYWORD.lower():
        return None
    if len(header) != 2:
        raise exceptions.AuthenticationFailed("Invalid token header.")
    try:
        return header[1].decode()
    except UnicodeError as exc:
        raise exceptions.AuthenticationFailed("Invalid token header.") from exc


class AdminTokenAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <OLYMPICS_ADMIN_TOKEN>``.

    A stale or malformed token on a safe method falls back to an anonymous
    request.
    """

    def authenticate(self, request):
        try:
            token = bearer_token(request)
        except exceptions.AuthenticationFailed:
            if request.method in permissions.SAFE_METHODS:
                return None
            raise
        if token is None:
            return None
        if not token_matches(token):
            if request.method in permissions.SAFE_METHODS:
                return None
            raise exceptions.AuthenticationFailed("Invalid token.")
        return (Operator(), token)

    def authenticate_header(self, request):
        return KEYWORD


class IsOperatorOrReadOnly(permissions.BasePermission):
    """Reads are public; writes need the admin token."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return isinstance(request.user, Operator)
