from __future__ import annotations

import pytest

from account_auth.domain.auth.credentials import (
    InvalidAccountNameError,
    InvalidEmailError,
    InvalidPasswordError,
    RawPassword,
    normalize_account_name,
    normalize_email,
)


def test_normalize_email_trims_and_lowercases() -> None:
    assert normalize_email(email="  Owner@Example.COM ") == "owner@example.com"


@pytest.mark.parametrize("email", ["", "   "])
def test_blank_email_is_rejected(email: str) -> None:
    with pytest.raises(InvalidEmailError, match="blank"):
        normalize_email(email=email)


@pytest.mark.parametrize("email", ["owner", "owner@", "@example.com", "owner@example", "a b@c.d"])
def test_malformed_email_is_rejected(email: str) -> None:
    with pytest.raises(InvalidEmailError, match="malformed"):
        normalize_email(email=email)


@pytest.mark.parametrize("name", ["Al", "  Alice  ", "x" * 20])
def test_account_name_within_bounds_is_accepted(name: str) -> None:
    assert normalize_account_name(name=name) == name.strip()


@pytest.mark.parametrize("name", ["", "A", "   B   ", "x" * 21])
def test_account_name_outside_bounds_is_rejected(name: str) -> None:
    with pytest.raises(InvalidAccountNameError):
        normalize_account_name(name=name)


@pytest.mark.parametrize("value", ["Passw0rd!", "aB3$efgh", "Zz9 zzzz", "Longer-Passw0rd~"])
def test_policy_compliant_password_is_accepted(value: str) -> None:
    assert RawPassword.parse(value).value == value


@pytest.mark.parametrize(
    ("value", "reason"),
    [
        ("Pa0!", "at least 8"),
        ("PASSW0RD!", "lowercase"),
        ("passw0rd!", "uppercase"),
        ("Password!", "digit"),
        ("Passw0rdX", "symbol"),
    ],
)
def test_password_policy_violations_are_rejected(value: str, reason: str) -> None:
    with pytest.raises(InvalidPasswordError, match=reason):
        RawPassword.parse(value)


def test_password_is_not_stripped() -> None:
    assert RawPassword.parse(" Passw0rd! ").value == " Passw0rd! "


def test_raw_password_repr_hides_value() -> None:
    assert "Passw0rd!" not in repr(RawPassword.parse("Passw0rd!"))


def test_credential_errors_are_value_errors() -> None:
    assert issubclass(InvalidEmailError, ValueError)
    assert issubclass(InvalidPasswordError, ValueError)
    assert issubclass(InvalidAccountNameError, ValueError)
