"""Password hashing and session tokens."""

import pytest

from dashboard.core.security import generate_token, hash_password, verify_password


def test_hash_roundtrip():
    hashed = hash_password("secret123", iterations=1000)

    assert hashed.startswith("pbkdf2_sha256$1000$")
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_salt_differs_per_hash():
    assert hash_password("secret123", iterations=1000) != hash_password("secret123", iterations=1000)


@pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$salt$abc", "pbkdf2_sha256$many$salt$abc", None])
def test_malformed_hashes_never_match(stored):
    assert not verify_password("secret123", stored)


def test_tokens_are_unique_and_url_safe():
    tokens = {generate_token() for _ in range(50)}

    assert len(tokens) == 50
    assert all(len(t) >= 40 and "/" not in t and "+" not in t for t in tokens)
