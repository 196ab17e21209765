import pytest

from bloghub.auth.passwords import hash_password, secrets_match, verify_password


def test_hash_is_salted_and_verifies():
    h1 = hash_password("pw1")
    h2 = hash_password("pw1")
    assert h1 != h2
    assert h1.startswith("$argon2")
    assert verify_password(h1, "pw1")
    assert verify_password(h2, "pw1")
    assert not verify_password(h1, "pw2")


def test_verify_rejects_empty_and_garbage_hashes():
    assert verify_password("", "pw") is False
    assert verify_password(hash_password("pw"), "") is False
    assert verify_password("plaintext-not-a-hash", "plaintext-not-a-hash") is False


def test_hash_rejects_empty_password():
    with pytest.raises(ValueError):
        hash_password("")


def test_secrets_match():
    assert secrets_match("admin123", "admin123")
    assert not secrets_match("admin123", "Admin123")
    assert not secrets_match("admin123", "")
