from typing import List

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error, Result, Return
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_sender import INotificationSender, ResetCodeNotification
from src.depends import get_notification_sender, get_unit_of_work
from src.domain.entities import PasswordResetToken, User  # noqa: F401  (registers tables)


class RecordingNotificationSender(INotificationSender):
    """Keeps every notification instead of sending it"""

    def __init__(self):
        self.sent: List[ResetCodeNotification] = []
        self.fail = False

    async def send_reset_code(self, notification: ResetCodeNotification) -> Result[None]:
        self.sent.append(notification)
        if self.fail:
            return Return.err(Error("NOTIFICATION_FAILED", "relay unavailable"))
        return Return.ok(None)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier():
    return RecordingNotificationSender()


@pytest_asyncio.fixture
async def client(db_session, notifier):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notification_sender] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
