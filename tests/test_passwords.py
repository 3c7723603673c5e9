from core.security import hash_password, verify_password


def test_hash_is_salted_and_verifies():
    first = hash_password("secret123", rounds=4)
    second = hash_password("secret123", rounds=4)

    assert first != second
    assert first != "secret123"
    assert verify_password("secret123", first)
    assert verify_password("secret123", second)


def test_wrong_password_does_not_verify():
    hashed = hash_password("secret123", rounds=4)

    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)


def test_malformed_hash_never_matches():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False
