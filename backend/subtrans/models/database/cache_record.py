"""Subtitle translation cache record model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from subtrans.models.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubtitleCacheRecord(Base):
    """Incremental translation result for one (content, source, target) key."""

    __tablename__ = "subtitle_cache"

    cache_key: Mapped[str] = mapped_column(String(512), primary_key=True)

    # Content identity
    content_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    source_lang: Mapped[str] = mapped_column(String(32), nullable=False)
    target_lang: Mapped[str] = mapped_column(String(32), nullable=False)

    # Original cue text -> translated text
    translations: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    # Progress tracking
    total: Mapped[int] = mapped_column(Integer, default=0)
    current: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
