# FILE: inland/services/user_service.py
import logging
from typing import Optional, Tuple

from sqlalchemy import select

from inland.core.context import AppContext
from inland.core.database import utcnow
from inland.core.errors import NotFoundError
from inland.models.git_integration import GitIntegration
from inland.models.user import User
from inland.services.encryption_service import encrypt_token
from inland.services.providers import PlatformUser
from inland.services.token_service import get_integration

logger = logging.getLogger("inland.auth")


async def find_user(ctx: AppContext, user_id: str) -> User:
    user = (await ctx.session.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise NotFoundError("User", user_id)
    return user


async def upsert_user(
    ctx: AppContext, username: str, email: Optional[str], avatar_url: Optional[str]
) -> User:
    user = (await ctx.session.execute(select(User).where(User.username == username))).scalar_one_or_none()
    if user:
        user.email = email
        user.avatar_url = avatar_url
        user.updated_at = utcnow()
    else:
        user = User(username=username, email=email, avatar_url=avatar_url)
        ctx.session.add(user)
    await ctx.session.commit()
    return user


async def upsert_git_integration(
    ctx: AppContext,
    user_id: str,
    platform: str,
    platform_username: str,
    access_token: str,
    installation_id: Optional[str] = None,
) -> GitIntegration:
    encrypted = encrypt_token(ctx.settings, access_token)
    integration = await get_integration(ctx, user_id, platform)
    if integration:
        integration.platform_username = platform_username
        integration.access_token = encrypted
        integration.installation_id = installation_id or integration.installation_id
        integration.updated_at = utcnow()
    else:
        integration = GitIntegration(
            user_id=user_id,
            platform=platform,
            platform_username=platform_username,
            access_token=encrypted,
            installation_id=installation_id,
        )
        ctx.session.add(integration)
    await ctx.session.commit()
    return integration


async def login_with_github(ctx: AppContext, code: str) -> Tuple[User, PlatformUser]:
    """OAuth callback: exchange the code, then create or refresh the user and its integration."""
    access_token = await ctx.auth.exchange_code(code)
    platform_user = await ctx.auth.fetch_user(access_token)

    email = platform_user.email
    if not email:
        email = await ctx.auth.fetch_primary_email(access_token)

    user = await upsert_user(ctx, platform_user.username, email, platform_user.avatar_url)
    await upsert_git_integration(ctx, user.id, ctx.auth.platform, platform_user.username, access_token)
    logger.info(f"User {user.username} signed in with {ctx.auth.platform}")
    return user, platform_user
