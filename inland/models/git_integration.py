# FILE: inland/models/git_integration.py
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, ForeignKey, DateTime, UniqueConstraint

from inland.core.database import Base, utcnow


class GitIntegration(Base):
    """Stores encrypted hosting-provider OAuth tokens per user and platform."""
    __tablename__ = "git_integrations"
    __table_args__ = (UniqueConstraint("user_id", "platform", name="uq_git_integrations_user_platform"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    platform: Mapped[str] = mapped_column(String(30), default="github")
    platform_username: Mapped[str] = mapped_column(String(100))
    access_token: Mapped[str] = mapped_column(Text, default="")  # Fernet encrypted, "" once invalidated
    installation_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
