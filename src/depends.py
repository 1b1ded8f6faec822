from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.notification_sender import (
    LoggingNotificationSender,
    SmtpNotificationSender,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_sender import INotificationSender
from src.app.services.password_policy import DefaultPasswordPolicy, IPasswordPolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notification_sender() -> INotificationSender:
    """
    Notification backend selected by EMAIL_BACKEND.

    "smtp" delivers through the configured relay; anything else logs.
    """
    if ApplicationConfig.EMAIL_BACKEND == "smtp":
        return SmtpNotificationSender(
            host=ApplicationConfig.SMTP_HOST,
            port=ApplicationConfig.SMTP_PORT,
            sender_email=ApplicationConfig.SENDER_EMAIL,
            service_name=ApplicationConfig.SERVICE_NAME,
            username=ApplicationConfig.SMTP_USERNAME,
            password=ApplicationConfig.SMTP_PASSWORD,
            use_tls=ApplicationConfig.SMTP_USE_TLS,
            timeout=ApplicationConfig.SMTP_TIMEOUT_SECONDS,
        )
    return LoggingNotificationSender(
        sender_email=ApplicationConfig.SENDER_EMAIL,
        service_name=ApplicationConfig.SERVICE_NAME,
    )


def get_password_policy() -> IPasswordPolicy:
    return DefaultPasswordPolicy()
