"""Cache record views returned by the cache store."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .context import ContentKey


class CacheRecord(BaseModel):
    """Detached snapshot of a persisted translation record."""

    model_config = ConfigDict(from_attributes=True)

    content_id: str
    source_lang: str
    target_lang: str
    translations: Dict[str, str] = Field(default_factory=dict)
    total: int = 0
    current: int = 0
    completed: bool = False
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> ContentKey:
        return ContentKey(
            content_id=self.content_id,
            source_lang=self.source_lang,
            target_lang=self.target_lang,
        )

    @property
    def percent_complete(self) -> int:
        if not self.total:
            return 0
        return round(100 * len(self.translations) / self.total)


class CacheStatus(BaseModel):
    """Pure status view derived from a cache record."""

    exists: bool = False
    percent_complete: int = Field(default=0, ge=0, le=100)
    completed: bool = False
    current: int = 0
    total: int = 0

    @classmethod
    def from_record(cls, record: Optional[CacheRecord]) -> "CacheStatus":
        if record is None:
            return cls()
        return cls(
            exists=True,
            percent_complete=min(100, record.percent_complete),
            completed=record.completed,
            current=record.current,
            total=record.total,
        )
