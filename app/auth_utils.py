"""
Request-scoped helpers: services stored on app.state and bearer-token lookup.
"""
from __future__ import annotations

from fastapi import Request

from core.auth_service import AuthService
from core.db.applications import ApplicationsStore
from core.db.users import UserStore
from core.errors import Unauthorized
from core.tokens import TokenError

BEARER_PREFIX = "bearer "


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_store(request: Request) -> UserStore:
    return request.app.state.users


def get_applications_store(request: Request) -> ApplicationsStore:
    return request.app.state.applications


def get_current_user(request: Request) -> dict:
    """
    Resolve ``Authorization: Bearer <token>`` to the user row.
    Raises Unauthorized when the header is missing, the token is bad or the user is gone.
    """
    header = request.headers.get("authorization") or ""
    if not header.lower().startswith(BEARER_PREFIX):
        raise Unauthorized("Missing bearer token")
    token = header[len(BEARER_PREFIX):].strip()

    service = get_auth_service(request)
    try:
        claims = service.tokens.verify(token, purpose="access")
    except TokenError as exc:
        raise Unauthorized("Invalid or expired token") from exc

    user = get_user_store(request).find_by_id(claims.get("id"))
    if not user:
        raise Unauthorized("Invalid or expired token")
    return user
