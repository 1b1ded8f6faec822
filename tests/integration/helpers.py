from datetime import timedelta
from typing import Optional

import bcrypt
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken, User

REQUEST_RESET_URL = f"{ApplicationConfig.API_PREFIX}/requestpasswordreset"
RESET_PASSWORD_URL = f"{ApplicationConfig.API_PREFIX}/resetpassword"

OLD_PASSWORD = "OldPass123"


async def create_test_user(
    db_session: AsyncSession,
    email: str = "test@example.com",
    owner_id: Optional[str] = None,
) -> User:
    """Create a user whose password is OLD_PASSWORD"""
    password_hash = bcrypt.hashpw(OLD_PASSWORD.encode(), bcrypt.gensalt(4))
    user = User(email=email, password_hash=password_hash.decode())
    if owner_id is not None:
        user.owner_id = owner_id
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def create_reset_token(
    db_session: AsyncSession,
    user: User,
    code: str = "123456",
    email: Optional[str] = None,
    expires_in: timedelta = timedelta(minutes=10),
    used: bool = False,
) -> PasswordResetToken:
    """Create a reset token for user expiring expires_in from now (negative = expired)"""
    now = utcnow()
    token = PasswordResetToken(
        code=code,
        owner_id=user.owner_id,
        email=email or user.email,
        used=used,
        created_at=now + expires_in - timedelta(minutes=15),
        expires_at=now + expires_in,
    )
    db_session.add(token)
    await db_session.commit()
    await db_session.refresh(token)
    return token
