from core.db.users import hash_password, verify_password


def test_hash_is_salted_and_verifies():
    h1 = hash_password("secret1")
    h2 = hash_password("secret1")
    assert h1 != h2
    assert h1 != "secret1"
    assert verify_password("secret1", h1)
    assert verify_password("secret1", h2)


def test_wrong_password_fails():
    assert verify_password("wrong", hash_password("secret1")) is False


def test_garbage_hash_returns_false():
    assert verify_password("secret1", "not-a-bcrypt-hash") is False
    assert verify_password("secret1", "") is False
