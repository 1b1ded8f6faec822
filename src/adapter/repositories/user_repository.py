from typing import Optional

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import ConcurrencyConflictError
from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by normalized email (primary key lookup)"""
        return await self.session.get(User, email)

    async def get_by_owner_id(self, owner_id: str) -> Optional[User]:
        """
        Get user by owner id through the owner_id index.

        owner_id is not unique at the schema level; ordering by email keeps
        "first match wins" deterministic if duplicates ever appear.
        """
        stmt = select(User).where(User.owner_id == owner_id).order_by(User.email).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_password_hash(self, user: User, password_hash: str) -> User:
        """Compare-and-set the password hash on the user's version"""
        expected_version = user.version
        stmt = (
            update(User)
            .where(User.email == user.email, User.version == expected_version)
            .values(password_hash=password_hash, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount != 1:
            raise ConcurrencyConflictError("User", user.email, expected_version)

        await self.session.refresh(user)
        return user
