"""
User Entity

Account holder whose password can be reset.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import generate_uuid, utcnow


class User(SQLModel, table=True):
    """
    User entity - keyed by normalized email.

    Business Rules:
    - Email is stored trimmed and lowercased and is the primary key
    - owner_id is stable across email changes; reset tokens reference it
    - Password stored as bcrypt hash
    - version is bumped on every password write (optimistic concurrency)
    """

    __tablename__ = "users"

    email: str = Field(primary_key=True, max_length=255)
    owner_id: str = Field(default_factory=generate_uuid, index=True, max_length=64)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    version: int = Field(default=1)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
