from typing import List, Optional

from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import ConcurrencyConflictError
from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import RESET_GROUP, PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_code(self, code: str) -> Optional[PasswordResetToken]:
        """Get password reset token by its code"""
        stmt = select(PasswordResetToken).where(
            PasswordResetToken.group_key == RESET_GROUP,
            PasswordResetToken.code == code,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_owner_id(self, owner_id: str) -> List[PasswordResetToken]:
        """Get every token (any state) issued to an owner"""
        stmt = select(PasswordResetToken).where(
            PasswordResetToken.group_key == RESET_GROUP,
            PasswordResetToken.owner_id == owner_id,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_many(self, codes: List[str]) -> int:
        """Delete tokens by code in a single statement"""
        if not codes:
            return 0
        stmt = delete(PasswordResetToken).where(
            PasswordResetToken.group_key == RESET_GROUP,
            PasswordResetToken.code.in_(codes),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete(self, code: str) -> bool:
        """Delete a single token by code"""
        return await self.delete_many([code]) > 0

    async def mark_used(self, token: PasswordResetToken) -> PasswordResetToken:
        """Compare-and-set used=True on the token's version"""
        expected_version = token.version
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.group_key == RESET_GROUP,
                PasswordResetToken.code == token.code,
                PasswordResetToken.version == expected_version,
            )
            .values(used=True, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount != 1:
            raise ConcurrencyConflictError("PasswordResetToken", token.code, expected_version)

        await self.session.refresh(token)
        return token
