import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from inland.core.config import Settings
from inland.services.providers import AuthProvider, GitHostingProvider


@dataclass
class AppContext:
    """Everything one request needs: config, db session and the remote collaborators."""

    settings: Settings
    session: AsyncSession
    hosting: GitHostingProvider
    auth: AuthProvider
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)
