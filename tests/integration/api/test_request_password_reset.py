"""
Integration tests for POST /requestpasswordreset

Covers:
- Code issuance and storage
- Account-not-found response shape
- Input validation and malformed bodies
- Rate limiting and cleanup of dead codes
- Notification failures staying invisible
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.domain.entities import PasswordResetToken
from tests.integration.helpers import REQUEST_RESET_URL, create_reset_token, create_test_user

SUCCESS_MESSAGE = "If your account exists, a reset link has been sent to your email."


async def get_tokens(db_session: AsyncSession, owner_id: str) -> list[PasswordResetToken]:
    stmt = (
        select(PasswordResetToken)
        .where(PasswordResetToken.owner_id == owner_id)
        .execution_options(populate_existing=True)
    )
    result = await db_session.exec(stmt)
    return list(result.all())


@pytest.mark.asyncio
async def test_successful_password_reset_request(
    client: AsyncClient, db_session: AsyncSession, notifier
):
    """
    Given I have an account
    When I request a password reset
    Then a 6-digit code valid for 15 minutes is stored unused
    And the code is sent to my email
    """
    user = await create_test_user(db_session, email="reset@example.com")
    owner_id = user.owner_id

    response = await client.post(REQUEST_RESET_URL, json={"email": "reset@example.com"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": SUCCESS_MESSAGE}

    tokens = await get_tokens(db_session, owner_id)
    assert len(tokens) == 1
    token = tokens[0]
    assert token.group_key == "reset"
    assert len(token.code) == 6 and token.code.isdigit()
    assert token.email == "reset@example.com"
    assert token.used is False
    assert token.expires_at - token.created_at == timedelta(minutes=15)

    assert len(notifier.sent) == 1
    assert notifier.sent[0].to_email == "reset@example.com"
    assert notifier.sent[0].masked_email == "re***@example.com"
    assert notifier.sent[0].code == token.code


@pytest.mark.asyncio
async def test_email_normalized_to_stored_key(
    client: AsyncClient, db_session: AsyncSession, notifier
):
    """Example: "Alice@Example.com " matches the user stored as alice@example.com"""
    user = await create_test_user(db_session, email="alice@example.com")
    owner_id = user.owner_id

    response = await client.post(REQUEST_RESET_URL, json={"email": "Alice@Example.com "})

    assert response.status_code == 200
    assert response.json()["success"] is True
    tokens = await get_tokens(db_session, owner_id)
    assert [t.email for t in tokens] == ["alice@example.com"]


@pytest.mark.asyncio
async def test_unknown_account_gets_redirect_with_200(
    client: AsyncClient, db_session: AsyncSession, notifier
):
    """No matching user: status stays 200, payload points to registration"""
    response = await client.post(REQUEST_RESET_URL, json={"email": "nobody@example.com"})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Account not found.",
        "redirectTo": "/subscribe",
    }

    result = await db_session.exec(select(PasswordResetToken))
    assert result.all() == []
    assert notifier.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"email": "not-an-email"}, {"email": ""}, {}])
async def test_invalid_email_rejected(client: AsyncClient, payload):
    response = await client.post(REQUEST_RESET_URL, json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "A valid email is required."}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [b"{not json", b"[]", b'"alice@example.com"', b'{"email": 42}'],
    ids=["broken-json", "array", "string", "non-string-email"],
)
async def test_malformed_body_rejected(client: AsyncClient, content):
    response = await client.post(
        REQUEST_RESET_URL, content=content, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid request format."}


@pytest.mark.asyncio
async def test_third_request_is_rate_limited(
    client: AsyncClient, db_session: AsyncSession, notifier
):
    """
    Given I already hold two active codes
    When I request a third
    Then I get 429, no code is stored and nothing is sent
    """
    user = await create_test_user(db_session, email="limited@example.com")
    owner_id = user.owner_id

    for _ in range(2):
        response = await client.post(REQUEST_RESET_URL, json={"email": "limited@example.com"})
        assert response.status_code == 200

    response = await client.post(REQUEST_RESET_URL, json={"email": "limited@example.com"})

    assert response.status_code == 429
    assert response.json() == {
        "success": False,
        "message": "Too many recent reset requests. Please wait before trying again.",
    }
    assert len(await get_tokens(db_session, owner_id)) == 2
    assert len(notifier.sent) == 2


@pytest.mark.asyncio
async def test_dead_codes_are_cleaned_up_and_not_counted(
    client: AsyncClient, db_session: AsyncSession
):
    """
    Given I hold one expired and one used code
    When I request a reset
    Then both dead codes are deleted and a new one is issued
    """
    user = await create_test_user(db_session, email="cleanup@example.com")
    owner_id = user.owner_id
    await create_reset_token(db_session, user, code="111111", expires_in=timedelta(minutes=-5))
    await create_reset_token(db_session, user, code="222222", used=True)

    response = await client.post(REQUEST_RESET_URL, json={"email": "cleanup@example.com"})

    assert response.status_code == 200
    assert response.json()["success"] is True

    tokens = await get_tokens(db_session, owner_id)
    assert len(tokens) == 1
    assert tokens[0].code not in ("111111", "222222")
    assert tokens[0].used is False


@pytest.mark.asyncio
async def test_other_accounts_codes_are_untouched(client: AsyncClient, db_session: AsyncSession):
    user = await create_test_user(db_session, email="me@example.com")
    owner_id = user.owner_id
    other = await create_test_user(db_session, email="other@example.com")
    other_owner_id = other.owner_id
    await create_reset_token(db_session, other, code="333333", used=True)

    response = await client.post(REQUEST_RESET_URL, json={"email": "me@example.com"})

    assert response.status_code == 200
    assert [t.code for t in await get_tokens(db_session, other_owner_id)] == ["333333"]
    assert len(await get_tokens(db_session, owner_id)) == 1


@pytest.mark.asyncio
async def test_notification_failure_still_returns_success(
    client: AsyncClient, db_session: AsyncSession, notifier
):
    user = await create_test_user(db_session, email="undeliverable@example.com")
    owner_id = user.owner_id
    notifier.fail = True

    response = await client.post(REQUEST_RESET_URL, json={"email": "undeliverable@example.com"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": SUCCESS_MESSAGE}
    assert len(await get_tokens(db_session, owner_id)) == 1
