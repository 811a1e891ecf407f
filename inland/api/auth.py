# FILE: inland/api/auth.py
import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse

from inland.api.deps import get_context, get_current_user
from inland.core.context import AppContext
from inland.core.errors import InlandError
from inland.schemas.auth import OAuthStartResponse, UserResponse
from inland.services import user_service
from inland.services.auth_service import (
    OAUTH_STATE_MINUTES,
    create_oauth_state,
    create_token,
    verify_oauth_state,
)
from inland.services.token_service import get_integration

logger = logging.getLogger("inland.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])

OAUTH_NONCE_COOKIE = "inland_oauth_nonce"


def _frontend_redirect(ctx: AppContext, **params) -> RedirectResponse:
    return RedirectResponse(url=f"{ctx.settings.app_url}/auth/callback?{urlencode(params)}")


@router.get("/github", response_model=OAuthStartResponse)
async def github_oauth_start(response: Response, ctx: AppContext = Depends(get_context)):
    """Start GitHub OAuth flow - returns URL to redirect user to."""
    nonce = secrets.token_urlsafe(16)
    state = create_oauth_state(ctx.settings, nonce)
    # the callback only accepts a state started from this browser
    response.set_cookie(
        OAUTH_NONCE_COOKIE,
        nonce,
        max_age=OAUTH_STATE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=ctx.settings.app_url.startswith("https"),
    )
    return OAuthStartResponse(auth_url=ctx.auth.oauth_url(state), state=state)


@router.get("/github/callback")
async def github_oauth_callback(
    request: Request,
    code: str = Query(...),
    state: str = Query(...),
    ctx: AppContext = Depends(get_context),
):
    """Handle GitHub OAuth callback and hand a session token to the frontend."""
    nonce = request.cookies.get(OAUTH_NONCE_COOKIE)
    if not verify_oauth_state(ctx.settings, state, nonce):
        logger.warning("Rejected OAuth callback with an invalid or foreign state")
        response = _frontend_redirect(ctx, error="invalid_state")
    else:
        try:
            user, _platform_user = await user_service.login_with_github(ctx, code)
            response = _frontend_redirect(ctx, token=create_token(ctx.settings, user.id, user.username))
        except InlandError as e:
            logger.error(f"GitHub OAuth error: {e.message}")
            response = _frontend_redirect(ctx, error="auth_failed")

    response.delete_cookie(OAUTH_NONCE_COOKIE)
    return response


@router.get("/me", response_model=UserResponse)
async def auth_me(
    user=Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    integration = await get_integration(ctx, user["id"], ctx.auth.platform)
    return UserResponse(
        id=user["id"],
        username=user["username"],
        email=user["email"],
        avatar_url=user["avatar_url"],
        github_connected=bool(integration and integration.access_token),
        created_at=user["created_at"],
    )
