"""
Password hashing and verification.
"""
from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of the input.
MAX_PASSWORD_BYTES = 72


def hash_password(raw_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(raw_password: str, password_hash: str) -> bool:
    """Constant-time check of ``raw_password`` against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


__all__ = ["BCRYPT_ROUNDS", "MAX_PASSWORD_BYTES", "hash_password", "verify_password"]
