"""
Registration, login and password-reset orchestration.

The service holds no state of its own: every call is checked against the
user store. Methods raise ``core.errors`` exceptions; the HTTP layer turns
them into JSON responses.
"""
from __future__ import annotations

import hmac
import logging
import re
from typing import Dict

from email_validator import EmailNotValidError, validate_email

from core.db.users import (
    MAX_PASSWORD_BYTES,
    DuplicateEmail,
    UserStore,
    hash_password,
    normalize_email,
    public_user,
    verify_password,
)
from core.errors import Conflict, Internal, InvalidToken, NotFound, Unauthorized, ValidationError
from core.tokens import TokenError, TokenIssuer

log = logging.getLogger(__name__)

DEFAULT_PASSWORD_MIN_LENGTH = 6


def _is_valid_email(email: str) -> bool:
    email = (email or "").strip()
    if not email:
        return False
    if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email):
        return False
    try:
        # Syntax only; no MX/deliverability lookups
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _is_valid_password(pw: str, min_length: int = DEFAULT_PASSWORD_MIN_LENGTH) -> bool:
    if not pw or not pw.strip():
        return False
    if len(pw) < min_length:
        return False
    return len(pw.encode("utf-8")) <= MAX_PASSWORD_BYTES


class AuthService:
    def __init__(
        self,
        users: UserStore,
        tokens: TokenIssuer,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ):
        self.users = users
        self.tokens = tokens
        self.password_min_length = password_min_length

    def _password_policy_message(self) -> str:
        return (
            f"Password must be at least {self.password_min_length} characters "
            f"and at most {MAX_PASSWORD_BYTES} bytes"
        )

    def _hash(self, raw_password: str) -> str:
        try:
            return hash_password(raw_password)
        except Exception as exc:
            log.exception("Password hashing failed")
            raise Internal("Password hashing failed") from exc

    def _find_by_email(self, email: str) -> Dict | None:
        try:
            return self.users.find_by_email(email)
        except Exception as exc:
            log.exception("User lookup failed")
            raise Internal("Database error") from exc

    def register(self, username: str | None, email: str | None, password: str | None) -> int:
        if not (username or "").strip() or not (email or "").strip() or not password:
            raise ValidationError("All fields are required")
        if not _is_valid_email(email):
            raise ValidationError("Please enter a valid email address")
        if not _is_valid_password(password, self.password_min_length):
            raise ValidationError(self._password_policy_message())

        password_hash = self._hash(password)
        try:
            user_id = self.users.insert(username, email, password_hash)
        except DuplicateEmail as exc:
            log.info("Registration rejected, email already registered: %s", normalize_email(email))
            raise Conflict("Email already registered") from exc
        except Exception as exc:
            log.exception("Failed to insert user")
            raise Internal("Registration failed") from exc

        log.info("Registered user id=%s", user_id)
        return user_id

    def login(self, email: str | None, password: str | None) -> Dict:
        """
        Check credentials and return ``{"token", "user"}``.
        Unknown email and wrong password raise the same Unauthorized error.
        """
        if not (email or "").strip() or not password:
            raise ValidationError("Email and password required")

        user = self._find_by_email(email)
        if not user or not verify_password(password, user["password_hash"]):
            log.info("Failed login for email=%s", normalize_email(email))
            raise Unauthorized("Invalid credentials")

        try:
            token = self.tokens.issue_access_token(user["id"], user["email"])
        except Exception as exc:
            log.exception("Failed to sign access token")
            raise Internal("Login failed") from exc
        return {"token": token, "user": public_user(user)}

    def request_password_reset(self, email: str | None) -> tuple[str, str]:
        """
        Issue and store a reset token for ``email``.
        Returns ``(email, token)`` for the caller to deliver.
        """
        if not (email or "").strip():
            raise ValidationError("Email is required")
        if not _is_valid_email(email):
            raise ValidationError("Please enter a valid email address")

        user = self._find_by_email(email)
        if not user:
            log.info("Reset requested for unknown email=%s", normalize_email(email))
            raise NotFound("Email not registered")

        try:
            token = self.tokens.issue_reset_token(user["email"])
            self.users.update_reset_token(user["email"], token)
        except Exception as exc:
            log.exception("Failed to store reset token for user_id=%s", user["id"])
            raise Internal("Failed to store reset token") from exc

        log.info("Reset token issued for user_id=%s", user["id"])
        return user["email"], token

    def reset_password(self, token: str | None, new_password: str | None) -> None:
        if not token or not new_password:
            raise ValidationError("Token and new password are required")
        if not _is_valid_password(new_password, self.password_min_length):
            raise ValidationError(self._password_policy_message())

        try:
            claims = self.tokens.verify(token, purpose="reset")
        except TokenError as exc:
            raise InvalidToken("Invalid or expired token") from exc

        user = self._find_by_email(claims.get("email", ""))
        stored = (user or {}).get("reset_token") or ""
        # Only the most recently issued, unused token is accepted.
        if not user or not hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8")):
            raise InvalidToken("Invalid or expired token")

        password_hash = self._hash(new_password)
        try:
            self.users.update_password(user["email"], password_hash)
        except Exception as exc:
            log.exception("Failed to update password for user_id=%s", user["id"])
            raise Internal("Failed to update password") from exc
        log.info("Password reset for user_id=%s", user["id"])


__all__ = ["AuthService", "DEFAULT_PASSWORD_MIN_LENGTH"]
