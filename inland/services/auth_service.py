# FILE: inland/services/auth_service.py
import hmac
import jwt
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Optional

from inland.core.config import Settings

OAUTH_STATE_MINUTES = 10


def create_token(settings: Settings, user_id: str, username: str) -> str:
    payload = {
        "user_id": user_id,
        "username": username,
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expiration_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Raises jwt.InvalidTokenError (incl. ExpiredSignatureError) on bad tokens."""
    return jwt.decode(token.strip(), settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def create_oauth_state(settings: Settings, nonce: str) -> str:
    # Signed and short-lived, so the callback needs no server-side state store
    payload = {
        "nonce": nonce,
        "purpose": "oauth_state",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=OAUTH_STATE_MINUTES),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_oauth_state(settings: Settings, state: str, nonce: Optional[str]) -> bool:
    """The state must be ours and carry the nonce stored in the browser that started the flow."""
    if not nonce:
        return False
    try:
        payload = jwt.decode(state, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError:
        return False
    if payload.get("purpose") != "oauth_state":
        return False
    return hmac.compare_digest(str(payload.get("nonce", "")), nonce)
