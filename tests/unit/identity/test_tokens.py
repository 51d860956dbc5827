"""
Name: Token Issuer Tests

Responsibilities:
  - Validate token payload (authorized, user_id, exp, claim flags)
  - Ensure claim validation precedes signing
  - Validate decode_token failures (bad signature, expired, missing fields)
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from userauth.crosscutting.exceptions import (
    InvalidClaimError,
    InvalidTokenError,
    SigningError,
)
from userauth.identity.claims import Claim
from userauth.identity.tokens import (
    JWT_ALGORITHM,
    TOKEN_LIFETIME,
    decode_token,
    issue_token,
)

pytestmark = pytest.mark.unit

SECRET = "token-tests-secret-0123456789-abcdef"


def _raw(token: str) -> dict:
    return jwt.decode(token, SECRET, algorithms=[JWT_ALGORITHM])


def test_token_payload_contains_user_and_claim_flags():
    before = datetime.now(timezone.utc)
    token = issue_token("abc", SECRET, [0])

    payload = _raw(token)
    assert payload["authorized"] is True
    assert payload["user_id"] == "abc"
    assert payload["admin"] is True
    assert "operator" not in payload

    expected = int((before + TOKEN_LIFETIME).timestamp())
    assert abs(payload["exp"] - expected) <= 5


def test_token_lifetime_is_168_hours():
    assert TOKEN_LIFETIME == timedelta(hours=168)


def test_token_uses_explicit_now():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    payload = _raw(issue_token("abc", SECRET, [], now=now))

    assert payload["exp"] == int((now + TOKEN_LIFETIME).timestamp())


def test_invalid_claim_rejected_before_signing():
    with pytest.raises(InvalidClaimError):
        issue_token("abc", SECRET, [0, 99999])


@pytest.mark.parametrize("secret", ["", "   "])
def test_empty_secret_raises_signing_error(secret):
    with pytest.raises(SigningError):
        issue_token("abc", secret, [0])


def test_decode_round_trip_exposes_claims():
    token = issue_token("abc", SECRET, [0, 1])

    decoded = decode_token(token, SECRET)

    assert decoded.user_id == "abc"
    assert decoded.has(Claim.ADMIN)
    assert decoded.has(Claim.OPERATOR)


def test_decode_with_wrong_secret_fails():
    token = issue_token("abc", SECRET, [])

    with pytest.raises(InvalidTokenError):
        decode_token(token, "another-secret-0123456789-abcdefgh")


def test_decode_expired_token_fails():
    issued = datetime.now(timezone.utc) - TOKEN_LIFETIME - timedelta(minutes=5)
    token = issue_token("abc", SECRET, [], now=issued)

    with pytest.raises(InvalidTokenError, match="expired"):
        decode_token(token, SECRET)


def test_decode_rejects_token_without_authorized_flag():
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode(
        {"authorized": False, "user_id": "abc", "exp": int(exp.timestamp())},
        SECRET,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(InvalidTokenError):
        decode_token(token, SECRET)


def test_decode_rejects_garbage():
    with pytest.raises(InvalidTokenError):
        decode_token("not.a.token", SECRET)
