"""
Password Reset Domain Entities

Each entity in its own file.
"""

from .enums import ResetTokenState

from .user import User
from .password_reset_token import PasswordResetToken, RESET_GROUP

__all__ = [
    # Enums
    "ResetTokenState",
    # Entities
    "User",
    "PasswordResetToken",
    "RESET_GROUP",
]
