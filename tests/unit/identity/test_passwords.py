"""
Name: Credential Hasher Tests

Responsibilities:
  - Validate hash/verify round trip
  - Ensure malformed or empty hashes verify as False (never raise)
  - Ensure argon2 failures surface as HashingError
"""

from unittest.mock import patch

import pytest
from argon2.exceptions import HashingError as Argon2HashingError
from userauth.crosscutting.exceptions import HashingError
from userauth.identity.passwords import CredentialHasher

pytestmark = pytest.mark.unit


def test_hash_then_verify_same_password(hasher):
    hashed = hasher.hash("s3cret")

    assert hashed != "s3cret"
    assert hashed.startswith("$argon2id$")
    assert hasher.verify("s3cret", hashed) is True


def test_verify_wrong_password_is_false(hasher):
    hashed = hasher.hash("s3cret")

    assert hasher.verify("other", hashed) is False


def test_same_password_produces_distinct_hashes(hasher):
    assert hasher.hash("s3cret") != hasher.hash("s3cret")


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$argon2id$v=19$broken"])
def test_verify_malformed_hash_is_false(hasher, bad_hash):
    assert hasher.verify("s3cret", bad_hash) is False


def test_hash_wraps_argon2_failure():
    hasher = CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)

    with patch.object(
        hasher._hasher, "hash", side_effect=Argon2HashingError("boom")
    ):
        with pytest.raises(HashingError) as exc_info:
            hasher.hash("s3cret")

    assert isinstance(exc_info.value.original_error, Argon2HashingError)
