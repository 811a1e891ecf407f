import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, String, ForeignKey, DateTime, UniqueConstraint

from inland.core.database import Base, utcnow


class Media(Base):
    """Uploaded asset belonging to a site. Stored as-is, no sync logic."""
    __tablename__ = "media"
    __table_args__ = (UniqueConstraint("site_id", "file_path", name="uq_media_site_path"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    site_id: Mapped[str] = mapped_column(String(36), ForeignKey("sites.id", ondelete="CASCADE"), index=True)
    filename: Mapped[str] = mapped_column(String(255))
    original_name: Mapped[str] = mapped_column(String(255))
    file_path: Mapped[str] = mapped_column(String(500))
    file_size: Mapped[int] = mapped_column(BigInteger)
    mime_type: Mapped[str] = mapped_column(String(100))
    storage_type: Mapped[str] = mapped_column(String(30), default="github")
    external_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    alt: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
