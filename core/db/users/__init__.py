"""
User-related storage helpers, split by responsibility.
"""
from core.db.users.auth import MAX_PASSWORD_BYTES, hash_password, verify_password
from core.db.users.user_store import DuplicateEmail, UserStore, normalize_email, public_user

__all__ = [
    "MAX_PASSWORD_BYTES",
    "hash_password",
    "verify_password",
    "DuplicateEmail",
    "UserStore",
    "normalize_email",
    "public_user",
]
