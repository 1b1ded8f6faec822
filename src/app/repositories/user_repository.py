from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by normalized email (primary key)"""
        pass

    @abstractmethod
    async def get_by_owner_id(self, owner_id: str) -> Optional[User]:
        """Get first user with this owner id"""
        pass

    @abstractmethod
    async def update_password_hash(self, user: User, password_hash: str) -> User:
        """
        Replace the password hash if the stored version still matches user.version.

        Raises ConcurrencyConflictError otherwise.
        """
        pass
