"""
Signed, expiring tokens (HS256 JWT).

Two purposes share one secret: ``access`` tokens returned by login and
``reset`` tokens mailed by forgot-password. ``verify`` refuses a token whose
``purpose`` claim does not match the one requested.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_MINUTES = 60
RESET_TOKEN_MINUTES = 15


class TokenError(Exception):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


class TokenIssuer:
    def __init__(self, secret: str):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret

    def issue(self, claims: Dict[str, Any], ttl: timedelta) -> str:
        payload = dict(claims)
        payload["exp"] = datetime.now(timezone.utc) + ttl
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str, purpose: str | None = None) -> Dict[str, Any]:
        """Return the claims, or raise TokenExpired / TokenInvalid."""
        if not token or not isinstance(token, str):
            raise TokenInvalid("empty token")
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError as exc:
            raise TokenExpired(str(exc)) from exc
        except JWTError as exc:
            raise TokenInvalid(str(exc)) from exc
        if purpose is not None and claims.get("purpose") != purpose:
            raise TokenInvalid("unexpected token purpose")
        return claims

    def issue_access_token(self, user_id: int, email: str) -> str:
        return self.issue(
            {"id": user_id, "email": email, "purpose": "access"},
            timedelta(minutes=ACCESS_TOKEN_MINUTES),
        )

    def issue_reset_token(self, email: str) -> str:
        return self.issue(
            # jti keeps two requests in the same second from yielding the same token
            {"email": email, "purpose": "reset", "jti": secrets.token_urlsafe(8)},
            timedelta(minutes=RESET_TOKEN_MINUTES),
        )


__all__ = [
    "ACCESS_TOKEN_MINUTES",
    "RESET_TOKEN_MINUTES",
    "TokenError",
    "TokenExpired",
    "TokenInvalid",
    "TokenIssuer",
]
