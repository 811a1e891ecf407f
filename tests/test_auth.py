import jwt
import pytest

from conftest import VALID_TOKEN
from inland.services import user_service
from inland.services.auth_service import create_oauth_state, create_token, decode_token, verify_oauth_state
from inland.services.encryption_service import decrypt_token
from inland.services.token_service import get_integration


def test_session_token_round_trip(settings):
    payload = decode_token(settings, create_token(settings, "u1", "octocat"))
    assert payload["user_id"] == "u1"
    assert payload["username"] == "octocat"


def test_session_token_wrong_secret(settings):
    token = jwt.encode({"user_id": "u1"}, "other-secret", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        decode_token(settings, token)


def test_oauth_state(settings):
    state = create_oauth_state(settings, "nonce")
    assert verify_oauth_state(settings, state, "nonce")
    # bound to the browser that started the flow
    assert not verify_oauth_state(settings, state, "other-nonce")
    assert not verify_oauth_state(settings, state, None)
    # a session token is not a valid state
    assert not verify_oauth_state(settings, create_token(settings, "u1", "octocat"), "nonce")
    assert not verify_oauth_state(settings, "garbage", "nonce")


async def test_login_creates_user_and_integration(ctx, github):
    user, platform_user = await user_service.login_with_github(ctx, "code")

    assert user.username == "octocat"
    assert user.email == "octo@example.com"
    assert platform_user.username == "octocat"

    integration = await get_integration(ctx, user.id)
    assert integration.platform_username == "octocat"
    assert integration.access_token != VALID_TOKEN
    assert decrypt_token(ctx.settings, integration.access_token) == VALID_TOKEN


async def test_second_login_reuses_rows(ctx, github):
    first, _ = await user_service.login_with_github(ctx, "code")
    integration = await get_integration(ctx, first.id)
    integration.access_token = ""
    await ctx.session.commit()

    second, _ = await user_service.login_with_github(ctx, "code")

    assert second.id == first.id
    refreshed = await get_integration(ctx, first.id)
    assert refreshed.id == integration.id
    assert decrypt_token(ctx.settings, refreshed.access_token) == VALID_TOKEN
