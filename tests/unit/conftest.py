from unittest.mock import AsyncMock, MagicMock

import pytest

from libs.result import Return


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with both repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_owner_id = AsyncMock(return_value=None)
    uow.users.update_password_hash = AsyncMock()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.list_by_owner_id = AsyncMock(return_value=[])
    uow.password_reset_tokens.delete_many = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete = AsyncMock(return_value=True)
    uow.password_reset_tokens.get_by_code = AsyncMock(return_value=None)
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.mark_used = AsyncMock()

    return uow


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_reset_code = AsyncMock(return_value=Return.ok(None))
    return notifier
