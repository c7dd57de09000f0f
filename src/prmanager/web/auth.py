"""Bearer token authentication for the PR Manager HTTP API.

Tokens carry the caller's role and id in clear text:

    Authorization: Bearer admin:<user_id>
    Authorization: Bearer user:<user_id>

The scheme is case-insensitive. Any other shape, an unknown role or an
empty id is rejected with 401.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from prmanager.logging import bind_request_context

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class AuthError(Exception):
    """Raised when a request lacks the credentials a route requires."""


@dataclass(frozen=True)
class Caller:
    """Identity parsed from the Authorization header."""

    user_id: str
    is_admin: bool


def parse_authorization(header: str | None) -> Caller | None:
    """Parse an Authorization header value.

    Returns:
        The caller, or None if the header is missing or malformed.
    """
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if not token or scheme.lower() != "bearer":
        return None

    role, sep, user_id = token.partition(":")
    if not sep or not user_id:
        return None
    if role == ROLE_ADMIN:
        return Caller(user_id=user_id, is_admin=True)
    if role == ROLE_USER:
        return Caller(user_id=user_id, is_admin=False)
    return None


def _authenticate(request: Request) -> Caller | None:
    caller = parse_authorization(request.headers.get("Authorization"))
    if caller is not None:
        bind_request_context(
            caller_id=caller.user_id,
            caller_role=ROLE_ADMIN if caller.is_admin else ROLE_USER,
        )
    return caller


async def require_admin(request: Request) -> Caller:
    """Dependency admitting only admin tokens."""
    caller = _authenticate(request)
    if caller is None or not caller.is_admin:
        raise AuthError("admin token required")
    return caller


async def require_any_auth(request: Request) -> Caller:
    """Dependency admitting any well-formed token."""
    caller = _authenticate(request)
    if caller is None:
        raise AuthError("auth token required")
    return caller
