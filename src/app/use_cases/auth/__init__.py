"""
Password Reset Use Cases

Issuing and redeeming reset codes.
"""

from .request_password_reset_use_case import RequestPasswordResetUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import RequestPasswordResetResponse, ResetPasswordResponse

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # DTOs - Responses
    "RequestPasswordResetResponse",
    "ResetPasswordResponse",
]
