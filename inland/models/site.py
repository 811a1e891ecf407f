import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey, DateTime, UniqueConstraint

from inland.core.database import Base, utcnow

# Canonical deploy states; the column stays an open string
DEPLOY_PENDING = "pending"
DEPLOY_INITIALIZING = "initializing"
DEPLOY_READY = "ready"
DEPLOY_ERROR = "error"
DEPLOY_DEPLOYED = "deployed"


class Site(Base):
    __tablename__ = "sites"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_sites_user_name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    git_repo: Mapped[str] = mapped_column(String(200), default="")  # owner/repo
    platform: Mapped[str] = mapped_column(String(30), default="github")
    deploy_status: Mapped[str] = mapped_column(String(30), default=DEPLOY_PENDING)
    deploy_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
