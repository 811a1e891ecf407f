from typing import Optional
from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    github_connected: bool = False
    created_at: str


class OAuthStartResponse(BaseModel):
    auth_url: str
    state: str
