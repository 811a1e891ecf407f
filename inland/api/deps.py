# FILE: inland/api/deps.py

import jwt
from datetime import timezone

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inland.core.config import Settings
from inland.core.context import AppContext
from inland.models.user import User
from inland.services.auth_service import decode_token

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db(request: Request):
    async with request.app.state.sessionmaker() as session:
        yield session


async def get_context(
        request: Request,
        db: AsyncSession = Depends(get_db),
) -> AppContext:
    return AppContext(
        settings=request.app.state.settings,
        session=db,
        hosting=request.app.state.hosting,
        auth=request.app.state.auth_provider,
    )


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db),
):
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_token(settings, credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("user_id") or payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at.replace(tzinfo=timezone.utc).isoformat(),
    }
