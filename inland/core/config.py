# inland/core/config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# ================== ENV ==================

ROOT_DIR = Path(__file__).resolve().parents[2]


def env(*names: str, default: Optional[str] = None) -> str:
    for n in names:
        v = os.environ.get(n)
        if v is not None and str(v).strip() != "":
            return v
    if default is not None:
        return default
    raise KeyError(f"Missing required env var. Tried: {', '.join(names)}")


def get_database_url() -> str:
    """Get database URL - any async SQLAlchemy URL, SQLite by default."""
    url = os.environ.get("DATABASE_URL", "")
    if url:
        return url
    db_path = ROOT_DIR / "inland.db"
    return f"sqlite+aiosqlite:///{db_path}"


@dataclass(frozen=True)
class Settings:
    """Application configuration, built once and passed around explicitly."""

    database_url: str = "sqlite+aiosqlite://"

    # ================== JWT ==================
    jwt_secret: str = "fallback-secret-for-development"
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24

    # Fernet key for GitHub access tokens at rest
    encryption_key: str = ""

    # ================== GITHUB ==================
    github_client_id: str = ""
    github_client_secret: str = ""
    auth_callback_url: str = "http://localhost:3001/api/auth/github/callback"
    app_url: str = "http://localhost:3000"
    github_api_base: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    user_agent: str = "Inland-CMS/1.0"
    http_timeout: float = 30.0

    # Built-in site template
    template_owner: str = "Saul-Mirone"
    template_repo: str = "inland-template-basic"

    # Freshly generated repositories answer 409/422 for a while
    repo_ready_initial_delay: float = 1.0
    repo_ready_backoff: float = 1.0
    repo_ready_max_attempts: int = 10

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(ROOT_DIR / ".env", override=False)
        return cls(
            database_url=get_database_url(),
            jwt_secret=env("JWT_SECRET", default="fallback-secret-for-development"),
            jwt_expiration_hours=int(env("JWT_EXPIRATION_HOURS", default="24")),
            encryption_key=os.environ.get("ENCRYPTION_KEY", ""),
            github_client_id=env("GITHUB_CLIENT_ID", default=""),
            github_client_secret=env("GITHUB_CLIENT_SECRET", default=""),
            auth_callback_url=env(
                "AUTH_CALLBACK_URL",
                default="http://localhost:3001/api/auth/github/callback",
            ),
            app_url=env("APP_URL", default="http://localhost:3000"),
            github_api_base=env("GITHUB_API_BASE", default="https://api.github.com"),
            http_timeout=float(env("GITHUB_HTTP_TIMEOUT", default="30")),
            template_owner=env("TEMPLATE_OWNER", default="Saul-Mirone"),
            template_repo=env("TEMPLATE_REPO", default="inland-template-basic"),
            cors_origins=env("CORS_ORIGINS", default="*").split(","),
        )
