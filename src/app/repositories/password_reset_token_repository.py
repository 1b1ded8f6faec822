from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[PasswordResetToken]:
        """Get password reset token by its code"""
        pass

    @abstractmethod
    async def list_by_owner_id(self, owner_id: str) -> List[PasswordResetToken]:
        """Get every token (any state) issued to an owner"""
        pass

    @abstractmethod
    async def delete_many(self, codes: List[str]) -> int:
        """Delete tokens by code in a single statement, returns rows deleted"""
        pass

    @abstractmethod
    async def delete(self, code: str) -> bool:
        """Delete a single token by code"""
        pass

    @abstractmethod
    async def mark_used(self, token: PasswordResetToken) -> PasswordResetToken:
        """
        Flip used to True if the stored version still matches token.version.

        Raises ConcurrencyConflictError otherwise.
        """
        pass
