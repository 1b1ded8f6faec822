from datetime import timedelta
from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.utils.cors import cors_json_response, cors_preflight_response
from src.app.services.notification_sender import INotificationSender
from src.app.services.password_policy import IPasswordPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import RequestPasswordResetUseCase, ResetPasswordUseCase
from src.depends import get_notification_sender, get_password_policy, get_unit_of_work

router = APIRouter(tags=["Password Reset"])

RequestModel = TypeVar("RequestModel", bound=BaseModel)


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Fields are optional so a missing email reaches the use case and gets
    the field-specific message instead of a generic format error.
    """

    email: Optional[str] = Field(default=None, description="Account email address")


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = Field(default=None, description="Account email address")
    code: Optional[str] = Field(default=None, description="6-digit code from the email")
    new_password: Optional[str] = Field(
        default=None, alias="newPassword", description="New password"
    )


async def parse_body(request: Request, model: Type[RequestModel]) -> RequestModel:
    """Parse the JSON body, mapping any decode/shape failure to a 400"""
    try:
        payload = await request.json()
        return model.model_validate(payload)
    except (ValueError, ValidationError):
        raise ClientError(Error("INVALID_INPUT", "Invalid request format."))


@router.options("/requestpasswordreset", include_in_schema=False)
async def request_password_reset_preflight(request: Request):
    return cors_preflight_response(request)


@router.post("/requestpasswordreset", status_code=status.HTTP_200_OK)
async def request_password_reset(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotificationSender = Depends(get_notification_sender),
):
    """
    Request Password Reset

    Issues a 6-digit code valid for 15 minutes and emails it to the account.

    Returns:
        - 200 OK: Code issued (uniform message), or account not found with
          redirectTo so status codes alone don't reveal account existence
        - 400 Bad Request: Malformed body or invalid email
        - 429 Too Many Requests: Account already has too many active codes
        - 500 Internal Server Error: Code could not be stored
    """
    body = await parse_body(request, RequestPasswordResetRequest)

    use_case = RequestPasswordResetUseCase(
        uow,
        notifier,
        token_ttl=timedelta(minutes=ApplicationConfig.RESET_TOKEN_TTL_MINUTES),
        max_active_tokens=ApplicationConfig.RESET_MAX_ACTIVE_TOKENS,
    )
    result = await use_case.execute(body.email)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "ACCOUNT_NOT_FOUND":
            return cors_json_response(
                request,
                status.HTTP_200_OK,
                {"success": False, "message": error.message, "redirectTo": "/subscribe"},
            )
        elif error.code == "INVALID_INPUT":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return cors_json_response(request, status.HTTP_200_OK, result.value.model_dump())


@router.options("/resetpassword", include_in_schema=False)
async def reset_password_preflight(request: Request):
    return cors_preflight_response(request)


@router.post("/resetpassword", status_code=status.HTTP_200_OK)
async def reset_password(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_policy: IPasswordPolicy = Depends(get_password_policy),
):
    """
    Reset Password

    Redeems a reset code and sets the new password.

    Raises:
        - 400 Bad Request: Invalid input, unknown/mismatched/expired/used
          code, or account no longer exists
        - 500 Internal Server Error: Storage failure or concurrent redemption
    """
    body = await parse_body(request, ResetPasswordRequest)

    use_case = ResetPasswordUseCase(
        uow,
        password_policy=password_policy,
        bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS,
    )
    result = await use_case.execute(body.email, body.code, body.new_password)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code in ("INVALID_INPUT", "INVALID_CODE", "CODE_EXPIRED", "ACCOUNT_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return cors_json_response(request, status.HTTP_200_OK, result.value.model_dump())
