"""
User rows: lookups, inserts, reset-token and password updates.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from core.db.base import Database, is_unique_violation

_USER_COLUMNS = "id, username, email, password_hash, reset_token, created_at"


class DuplicateEmail(Exception):
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserStore:
    def __init__(self, db: Database):
        self._db = db

    def find_by_email(self, email: str) -> Optional[Dict]:
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",
                (normalize_email(email),),
            )
            row = cur.fetchone()
        return dict(row) if row else None

    def find_by_id(self, user_id: int) -> Optional[Dict]:
        """Look up a user by numeric id. Returns dict or None."""
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return dict(row) if row else None

    def insert(self, username: str, email: str, password_hash: str) -> int:
        """Insert a user and return its id. Raises DuplicateEmail if the email is taken."""
        now = datetime.now(timezone.utc).isoformat(timespec="seconds")
        with self._db.connection() as conn:
            cur = conn.cursor()
            try:
                cur.execute(
                    """
                    INSERT INTO users (username, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?)
                    RETURNING id
                    """,
                    (username.strip(), normalize_email(email), password_hash, now),
                )
                row = cur.fetchone()
                conn.commit()
            except Exception as exc:
                if is_unique_violation(exc):
                    raise DuplicateEmail(normalize_email(email)) from exc
                raise
        return int(row["id"])

    def update_reset_token(self, email: str, token: str | None) -> None:
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "UPDATE users SET reset_token = ? WHERE email = ?",
                (token, normalize_email(email)),
            )
            conn.commit()

    def update_password(self, email: str, password_hash: str) -> None:
        """Set a new password hash and clear any pending reset token in one update."""
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "UPDATE users SET password_hash = ?, reset_token = NULL WHERE email = ?",
                (password_hash, normalize_email(email)),
            )
            conn.commit()


def public_user(user: Dict) -> Dict:
    """Projection safe to return to clients."""
    return {"id": user["id"], "username": user["username"], "email": user["email"]}


__all__ = ["DuplicateEmail", "UserStore", "normalize_email", "public_user"]
