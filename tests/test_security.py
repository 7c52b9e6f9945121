"""Tests for password hashing and login tokens."""

from __future__ import annotations

from datetime import timedelta

import pytest

from school_admin.utils.security import (
    AuthenticationError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hashes_are_salted_and_verifiable():
    first = hash_password("secret-password")
    second = hash_password("secret-password")

    assert first != second
    assert verify_password("secret-password", first)
    assert not verify_password("wrong-password", first)


def test_garbage_hash_never_verifies():
    assert not verify_password("secret-password", "not base64!")


def test_token_carries_subject_and_name():
    payload = decode_access_token(create_access_token("7", name="Admin"))

    assert payload.sub == "7"
    assert payload.user == {"id": "7", "name": "Admin"}
    assert payload.exp > payload.iat


def test_expired_or_tampered_tokens_are_rejected():
    expired = create_access_token("7", expires_delta=timedelta(seconds=-5))
    tampered = create_access_token("7")[:-2] + "xx"

    with pytest.raises(AuthenticationError):
        decode_access_token(expired)
    with pytest.raises(AuthenticationError):
        decode_access_token(tampered)
