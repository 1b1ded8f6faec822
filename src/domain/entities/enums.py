"""
Password Reset Domain Enums
"""

from enum import Enum


class ResetTokenState(str, Enum):
    """Lifecycle state of a reset token. used and expired are terminal."""

    active = "active"
    used = "used"
    expired = "expired"
