"""
Use Cases

Organized into domain folders:
- auth/: Password reset flows
"""

from .auth import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)

__all__ = [
    # Auth
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
]
