"""
Reset Password Use Case

Redeems a reset code and stores the new password hash.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import bcrypt
from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.repositories.errors import ConcurrencyConflictError
from src.app.services.password_policy import DefaultPasswordPolicy, IPasswordPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import ResetTokenState
from .dtos import ResetPasswordResponse
from .validation import is_valid_email, is_valid_reset_code, mask_email, normalize_email

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """bcrypt hash of the UTF-8 password, truncated to the 72 bytes bcrypt reads"""
    secret = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds)).decode()


class ResetPasswordUseCase:
    """
    Use case for redeeming a reset code.

    Business Rules:
    - All input is validated before any storage access
    - Unknown code and code issued to another email both give INVALID_CODE
    - Expired or used codes give CODE_EXPIRED and are deleted (best effort)
    - The code is consumed with a compare-and-set on its version, so only
      one of several concurrent redemptions can succeed
    - The new password is hashed before the code is consumed; bcrypt only
      reads 72 bytes, so longer UTF-8 encodings are truncated
    - The owner is resolved by owner_id, not by the email on the code
    - The new bcrypt hash is written with a compare-and-set on the user's
      version, keyed by the user's current email
    - A consumed code stays consumed even if the password write fails;
      the user has to request a new code
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_policy: Optional[IPasswordPolicy] = None,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.password_policy = password_policy or DefaultPasswordPolicy()
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock

    def _validate_input(self, email: str, code: object, new_password: object) -> Result[None]:
        if not is_valid_email(email):
            return Return.err(Error("INVALID_INPUT", "Valid email is required."))

        if not is_valid_reset_code(code):
            return Return.err(Error("INVALID_INPUT", "Valid 6-digit code is required."))

        return self.password_policy.validate(new_password)

    async def execute(
        self, email: object, code: object, new_password: object
    ) -> Result[ResetPasswordResponse]:
        """
        Execute reset password use case.

        Args:
            email: Raw email as submitted by the client
            code: 6-digit reset code from the email
            new_password: Candidate password

        Returns:
            Result with success response, or Error

        Errors:
            - INVALID_INPUT: Malformed email or code, or password rejected by policy
            - INVALID_CODE: Code unknown or issued to a different email
            - CODE_EXPIRED: Code expired or already used
            - ACCOUNT_NOT_FOUND: Owner of the code no longer exists
            - STORAGE_ERROR: Read or write failed, or lost a concurrent update
        """
        normalized_email = normalize_email(email)
        validation = self._validate_input(normalized_email, code, new_password)
        if validation.is_err():
            return Return.err(validation.error)

        masked = mask_email(normalized_email)

        async with self.uow:
            try:
                token = await self.uow.password_reset_tokens.get_by_code(code)
            except SQLAlchemyError as e:
                logger.error(f"Reset code lookup failed: {e}")
                return Return.err(Error("STORAGE_ERROR", "Server error."))

            if token is None:
                logger.warning(f"Unknown reset code submitted for {masked}")
                return Return.err(Error("INVALID_CODE", "Invalid or expired code."))

            if normalize_email(token.email) != normalized_email:
                logger.warning(f"Reset code submitted with mismatched email {masked}")
                return Return.err(Error("INVALID_CODE", "Invalid code or email."))

            state = token.state(self.clock())
            if state is not ResetTokenState.active:
                await self._discard(code)
                logger.info(f"Rejected {state.value} reset code for {masked}")
                return Return.err(
                    Error("CODE_EXPIRED", "Code has expired or already been used.")
                )

            owner_id = token.owner_id
            password_hash = hash_password(new_password, self.bcrypt_rounds)

            try:
                await self.uow.password_reset_tokens.mark_used(token)
                await self.uow.commit()
            except (ConcurrencyConflictError, SQLAlchemyError) as e:
                logger.error(f"Could not consume reset code for {masked}: {e}")
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", "Server error."))

            try:
                user = await self.uow.users.get_by_owner_id(owner_id)
            except SQLAlchemyError as e:
                logger.error(f"Owner lookup failed for {masked}: {e}")
                return Return.err(Error("STORAGE_ERROR", "Server error."))

            if user is None:
                logger.warning(f"Reset code for {masked} points at a missing account")
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found."))

            try:
                await self.uow.users.update_password_hash(user, password_hash)
                await self.uow.commit()
            except (ConcurrencyConflictError, SQLAlchemyError) as e:
                logger.error(f"Password update failed for {masked}: {e}")
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", "Failed to update password."))

        logger.info(f"Password reset completed for {masked}")

        return Return.ok(
            ResetPasswordResponse(success=True, message="Password reset successfully.")
        )

    async def _discard(self, code: str) -> None:
        """Delete a dead code; failures are only logged"""
        try:
            await self.uow.password_reset_tokens.delete(code)
            await self.uow.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Could not delete dead reset code: {e}")
            await self.uow.rollback()
