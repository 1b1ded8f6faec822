"""
Password Reset Use Case DTOs (Data Transfer Objects)

Response classes returned by the reset use cases.
"""

from pydantic import BaseModel


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    success: bool
    message: str


class ResetPasswordResponse(BaseModel):
    """Response for reset password use case"""

    success: bool
    message: str
