import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, ForeignKey, DateTime, UniqueConstraint

from inland.core.database import Base, utcnow

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"


class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (UniqueConstraint("site_id", "slug", name="uq_articles_site_slug"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    site_id: Mapped[str] = mapped_column(String(36), ForeignKey("sites.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(100))
    content: Mapped[str] = mapped_column(Text, default="")  # body only, no front matter
    status: Mapped[str] = mapped_column(String(20), default=STATUS_DRAFT)
    # path of the hosted copy as last written or imported, e.g. content/hello.md
    repo_path: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
