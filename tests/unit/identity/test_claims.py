"""
Name: Claim Validator Tests

Responsibilities:
  - Validate acceptance of enumeration codes
  - Ensure the first invalid code is reported
  - Ensure the claim table cannot be mutated through all_claims()
"""

import pytest
from userauth.crosscutting.exceptions import InvalidClaimError, ValidationError
from userauth.identity.claims import (
    Claim,
    all_claims,
    claim_name,
    is_valid_claim,
    validate_claims,
)

pytestmark = pytest.mark.unit


def test_valid_claims_pass():
    validate_claims([0, 1, 0])
    validate_claims([])


def test_unknown_code_raises_invalid_claim():
    with pytest.raises(InvalidClaimError) as exc_info:
        validate_claims([99999])

    assert exc_info.value.code == 99999
    assert "99999" in exc_info.value.message


def test_first_invalid_code_is_reported():
    with pytest.raises(InvalidClaimError) as exc_info:
        validate_claims([0, 7, 8])

    assert exc_info.value.code == 7


def test_invalid_claim_is_a_validation_error():
    assert issubclass(InvalidClaimError, ValidationError)


@pytest.mark.parametrize("code", [True, False, "0", 1.0, None, -1])
def test_non_enumeration_values_are_invalid(code):
    assert is_valid_claim(code) is False


def test_claim_names_are_lowercase_member_names():
    assert Claim.ADMIN.display_name == "admin"
    assert claim_name(0) == "admin"
    assert claim_name(1) == "operator"


def test_all_claims_returns_a_copy():
    table = all_claims()
    table[42] = "root"

    assert all_claims() == {0: "admin", 1: "operator"}
