# FILE: inland/services/token_service.py
import logging

from sqlalchemy import select

from inland.core.context import AppContext
from inland.core.database import utcnow
from inland.core.errors import TokenError
from inland.models.git_integration import GitIntegration
from inland.services.encryption_service import InvalidToken, decrypt_token

logger = logging.getLogger("inland.tokens")

NO_INTEGRATION = "No GitHub integration found for user"
INVALID_TOKEN = "GitHub token is invalid. Please reconnect your GitHub account."


async def get_integration(ctx: AppContext, user_id: str, platform: str = "github"):
    return (
        await ctx.session.execute(
            select(GitIntegration).where(
                GitIntegration.user_id == user_id,
                GitIntegration.platform == platform,
            )
        )
    ).scalar_one_or_none()


async def _clear_token(ctx: AppContext, integration: GitIntegration) -> None:
    integration.access_token = ""
    integration.updated_at = utcnow()
    await ctx.session.commit()


async def resolve_token(ctx: AppContext, user_id: str, platform: str = "github") -> str:
    """
    Return a validated hosting access token for the user.

    An invalid token is cleared from the integration row (the row is kept), so
    the user has to reconnect before any further hosting call succeeds.
    """
    integration = await get_integration(ctx, user_id, platform)
    if not integration or not integration.access_token:
        raise TokenError(NO_INTEGRATION)

    try:
        token = decrypt_token(ctx.settings, integration.access_token)
    except InvalidToken:
        logger.warning(f"Stored token for user {user_id} cannot be decrypted, clearing it")
        await _clear_token(ctx, integration)
        raise TokenError(INVALID_TOKEN)

    result = await ctx.auth.validate_token(token)
    if not result.is_valid:
        logger.info(f"Token for user {user_id} failed validation, clearing it")
        await _clear_token(ctx, integration)
        raise TokenError(result.reason or INVALID_TOKEN)

    return token
