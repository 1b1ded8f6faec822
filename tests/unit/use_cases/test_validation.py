"""
Unit tests for reset input helpers
"""
import pytest

from src.app.use_cases.auth.validation import (
    generate_reset_code,
    is_valid_email,
    is_valid_reset_code,
    mask_email,
    normalize_email,
)


def test_normalize_email_trims_and_lowercases():
    assert normalize_email("Alice@Example.com ") == "alice@example.com"
    assert normalize_email("\tBOB@EXAMPLE.ORG\n") == "bob@example.org"


def test_normalize_email_handles_none():
    assert normalize_email(None) == ""


@pytest.mark.parametrize(
    "email,expected",
    [
        ("alice@example.com", True),
        ("a.b+tag@sub.example.co.uk", True),
        ("alice@example", False),
        ("alice@@example.com", False),
        ("@example.com", False),
        ("alice@.com", False),
        ("ali ce@example.com", False),
        ("", False),
    ],
)
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize(
    "code,expected",
    [
        ("123456", True),
        ("000000", True),
        ("12345", False),
        ("1234567", False),
        ("12345a", False),
        ("123456\n", False),
        (123456, False),
        (None, False),
    ],
)
def test_is_valid_reset_code(code, expected):
    assert is_valid_reset_code(code) is expected


def test_generated_codes_are_six_digits_in_range():
    for _ in range(200):
        code = generate_reset_code()
        assert is_valid_reset_code(code)
        assert 100000 <= int(code) <= 999999


@pytest.mark.parametrize(
    "email,masked",
    [
        ("alice@example.com", "al***@example.com"),
        ("jonathan@example.com", "jo******@example.com"),
        ("ab@example.com", "ab***@example.com"),
        ("a@example.com", "a***@example.com"),
    ],
)
def test_mask_email(email, masked):
    assert mask_email(email) == masked
