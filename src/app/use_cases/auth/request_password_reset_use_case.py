"""
Request Password Reset Use Case

Issues a 6-digit reset code for an existing account, enforcing the
per-account active code limit and cleaning up dead codes on the way.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.notification_sender import INotificationSender, ResetCodeNotification
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken
from .dtos import RequestPasswordResetResponse
from .validation import generate_reset_code, is_valid_email, mask_email, normalize_email

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(minutes=15)
MAX_ACTIVE_TOKENS = 2
MAX_CODE_ATTEMPTS = 5
NOTIFICATION_TIMEOUT_SECONDS = 30.0


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset code.

    Business Rules:
    - Email is trimmed and lowercased before lookup
    - Unknown accounts get ACCOUNT_NOT_FOUND (served as a 200 with a
      redirect, so status codes don't reveal whether the account exists)
    - Used or expired codes of the account are deleted on every request;
      failure to delete them never blocks the request
    - At most MAX_ACTIVE_TOKENS unused, unexpired codes per account;
      two concurrent requests can both pass this check
    - Codes expire RESET_TOKEN_TTL after creation
    - Notification delivery failure is logged and otherwise ignored
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotificationSender,
        token_ttl: timedelta = RESET_TOKEN_TTL,
        max_active_tokens: int = MAX_ACTIVE_TOKENS,
        notification_timeout: float = NOTIFICATION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.notifier = notifier
        self.token_ttl = token_ttl
        self.max_active_tokens = max_active_tokens
        self.notification_timeout = notification_timeout
        self.clock = clock

    async def execute(self, email: object) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Raw email as submitted by the client

        Returns:
            Result with the uniform success response, or Error

        Errors:
            - INVALID_INPUT: Email is not email-shaped
            - ACCOUNT_NOT_FOUND: No user with this email
            - RATE_LIMITED: Account already has too many active codes
            - STORAGE_ERROR: Lookup or persistence failed
        """
        normalized_email = normalize_email(email)
        if not is_valid_email(normalized_email):
            return Return.err(Error("INVALID_INPUT", "A valid email is required."))

        masked = mask_email(normalized_email)

        async with self.uow:
            try:
                user = await self.uow.users.get_by_email(normalized_email)
            except SQLAlchemyError as e:
                logger.error(f"User lookup failed for {masked}: {e}")
                return Return.err(Error("STORAGE_ERROR", "Could not generate reset token."))

            if user is None:
                logger.info(f"Password reset requested for unknown account {masked}")
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found."))

            # Rollbacks expire loaded instances, keep plain values from here on
            owner_id = user.owner_id
            now = self.clock()

            active_tokens = await self._purge_stale_tokens(owner_id, now)
            if len(active_tokens) >= self.max_active_tokens:
                logger.warning(
                    f"Password reset rate limited for {masked}: "
                    f"{len(active_tokens)} active codes"
                )
                return Return.err(
                    Error(
                        "RATE_LIMITED",
                        "Too many recent reset requests. Please wait before trying again.",
                    )
                )

            try:
                token = await self._mint_token(owner_id, normalized_email, now)
                if token is None:
                    logger.error(f"No free reset code after {MAX_CODE_ATTEMPTS} attempts")
                    await self.uow.rollback()
                    return Return.err(Error("STORAGE_ERROR", "Could not generate reset token."))
                code = token.code
                await self.uow.commit()
            except SQLAlchemyError as e:
                logger.error(f"Failed to persist reset code for {masked}: {e}")
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", "Could not generate reset token."))

        logger.info(f"Reset code issued for {masked}")

        await self._notify(
            ResetCodeNotification(
                to_email=normalized_email,
                masked_email=masked,
                code=code,
                expires_in_minutes=int(self.token_ttl.total_seconds() // 60),
            )
        )

        return Return.ok(
            RequestPasswordResetResponse(
                success=True,
                message="If your account exists, a reset link has been sent to your email.",
            )
        )

    async def _purge_stale_tokens(self, owner_id: str, now: datetime) -> List[PasswordResetToken]:
        """
        Delete the owner's used/expired codes and return the active ones.

        Storage failures here are logged and swallowed.
        """
        try:
            tokens = await self.uow.password_reset_tokens.list_by_owner_id(owner_id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not list reset codes for owner {owner_id}: {e}")
            await self.uow.rollback()
            return []

        active = [token for token in tokens if token.is_active(now)]
        stale_codes = [token.code for token in tokens if not token.is_active(now)]

        if stale_codes:
            try:
                await self.uow.password_reset_tokens.delete_many(stale_codes)
                await self.uow.commit()
            except SQLAlchemyError as e:
                logger.warning(f"Reset code cleanup failed for owner {owner_id}: {e}")
                await self.uow.rollback()

        return active

    async def _mint_token(
        self, owner_id: str, email: str, now: datetime
    ) -> Optional[PasswordResetToken]:
        """
        Persist a new token under a code no active token holds.

        A stale token sitting on the drawn code is replaced. Returns None
        if every attempt hit an active code.
        """
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_reset_code()
            existing = await self.uow.password_reset_tokens.get_by_code(code)
            if existing is not None:
                if existing.is_active(now):
                    continue
                await self.uow.password_reset_tokens.delete(code)

            return await self.uow.password_reset_tokens.create(
                PasswordResetToken(
                    code=code,
                    owner_id=owner_id,
                    email=email,
                    used=False,
                    created_at=now,
                    expires_at=now + self.token_ttl,
                )
            )

        return None

    async def _notify(self, notification: ResetCodeNotification) -> None:
        """Send the code; the outcome never reaches the caller"""
        try:
            sent = await asyncio.wait_for(
                self.notifier.send_reset_code(notification), timeout=self.notification_timeout
            )
        except TimeoutError:
            logger.warning(f"Reset email to {notification.masked_email} timed out")
            return
        except Exception:
            logger.exception(f"Reset email to {notification.masked_email} failed")
            return

        if sent.is_err():
            logger.warning(
                f"Reset email to {notification.masked_email} not delivered: {sent.error.message}"
            )
