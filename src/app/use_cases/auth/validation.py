"""
Input normalization and formatting helpers shared by the reset use cases.
"""

import re
import secrets

_EMAIL_SHAPE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_RESET_CODE_SHAPE = re.compile(r"[0-9]{6}")

RESET_CODE_MIN = 100000
RESET_CODE_SPACE = 900000


def normalize_email(email: object) -> str:
    """Trim and lowercase; None becomes the empty string"""
    if email is None:
        return ""
    return str(email).strip().lower()


def is_valid_email(email: str) -> bool:
    return _EMAIL_SHAPE.fullmatch(email) is not None


def is_valid_reset_code(code: object) -> bool:
    return isinstance(code, str) and _RESET_CODE_SHAPE.fullmatch(code) is not None


def generate_reset_code() -> str:
    """Uniform random code in [100000, 999999]"""
    return str(RESET_CODE_MIN + secrets.randbelow(RESET_CODE_SPACE))


def mask_email(email: str) -> str:
    """
    Hide most of the local part: "alice@example.com" -> "al***@example.com".

    Keeps up to two leading characters and always emits at least three
    asterisks so short local parts don't reveal their length.
    """
    user, _, domain = email.partition("@")
    visible = user[:2]
    stars = "*" * max(3, len(user) - len(visible))
    return f"{visible}{stars}@{domain}"
