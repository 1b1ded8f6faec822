"""
PasswordResetToken Entity

Short-lived, single-use 6-digit reset codes.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import ResetTokenState

RESET_GROUP = "reset"


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - one row per issued code.

    Business Rules:
    - Code is unique within the "reset" group
    - Expires 15 minutes after creation
    - Single-use: used flips to True once and never back
    - Expired or used tokens are dead and get deleted opportunistically
    - email is the address captured at issuance; owner_id links to the user
    """

    __tablename__ = "password_reset_tokens"

    group_key: str = Field(default=RESET_GROUP, primary_key=True, max_length=16)
    code: str = Field(primary_key=True, min_length=6, max_length=6)

    owner_id: str = Field(max_length=64)
    email: str = Field(max_length=255)

    used: bool = Field(default=False)
    version: int = Field(default=1)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_owner_id", "owner_id"),
        Index("idx_password_reset_expires_at", "expires_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        return not self.used and not self.is_expired(now)

    def state(self, now: datetime) -> ResetTokenState:
        if self.used:
            return ResetTokenState.used
        if self.is_expired(now):
            return ResetTokenState.expired
        return ResetTokenState.active
