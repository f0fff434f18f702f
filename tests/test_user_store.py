from datetime import datetime, timezone

import pytest

from core.db.base import Database
from core.db.users import DuplicateEmail, UserStore


def test_insert_and_lookup(users):
    user_id = users.insert("alice", "A@X.com ", "hash-1")

    by_email = users.find_by_email("a@x.com")
    by_id = users.find_by_id(user_id)
    assert by_email == by_id
    assert by_email["username"] == "alice"
    assert by_email["email"] == "a@x.com"
    assert by_email["password_hash"] == "hash-1"
    assert by_email["reset_token"] is None


def test_duplicate_email_rejected(users):
    users.insert("alice", "a@x.com", "hash-1")
    with pytest.raises(DuplicateEmail):
        users.insert("alice2", "A@x.com", "hash-2")
    # original row untouched
    assert users.find_by_email("a@x.com")["password_hash"] == "hash-1"


def test_usernames_need_not_be_unique(users):
    first = users.insert("sam", "s1@x.com", "h")
    second = users.insert("sam", "s2@x.com", "h")
    assert first != second


def test_missing_user_returns_none(users):
    assert users.find_by_email("nobody@x.com") is None
    assert users.find_by_id(999) is None


def test_reset_token_set_and_cleared_by_password_update(users):
    users.insert("alice", "a@x.com", "hash-1")
    users.update_reset_token("a@x.com", "tok")
    assert users.find_by_email("a@x.com")["reset_token"] == "tok"

    users.update_password("a@x.com", "hash-2")
    row = users.find_by_email("a@x.com")
    assert row["password_hash"] == "hash-2"
    assert row["reset_token"] is None


def test_closed_database_refuses_connections(settings):
    db = Database(settings.database_url)
    store = UserStore(db)
    with pytest.raises(RuntimeError):
        store.find_by_email("a@x.com")

    db.open()
    assert db.ping() is True
    db.close()
    with pytest.raises(RuntimeError):
        store.find_by_email("a@x.com")


def test_unsupported_database_url():
    with pytest.raises(RuntimeError):
        Database("mysql://root@localhost/jobs")


def test_created_at_is_timezone_aware_utc(users):
    users.insert("alice", "a@x.com", "hash-1")
    created = datetime.fromisoformat(users.find_by_email("a@x.com")["created_at"])
    assert created.utcoffset() == timezone.utc.utcoffset(None)
