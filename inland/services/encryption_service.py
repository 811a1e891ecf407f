# FILE: inland/services/encryption_service.py
from cryptography.fernet import Fernet, InvalidToken

from inland.core.config import Settings


def _get_fernet(settings: Settings) -> Fernet:
    if not settings.encryption_key:
        raise RuntimeError("ENCRYPTION_KEY not configured in environment")
    return Fernet(settings.encryption_key.encode())


def encrypt_token(settings: Settings, token: str) -> str:
    """Encrypt a token for storage."""
    f = _get_fernet(settings)
    return f.encrypt(token.encode()).decode()


def decrypt_token(settings: Settings, encrypted: str) -> str:
    """Decrypt a stored token. Raises InvalidToken if the key changed."""
    f = _get_fernet(settings)
    return f.decrypt(encrypted.encode()).decode()


__all__ = ["encrypt_token", "decrypt_token", "InvalidToken"]
