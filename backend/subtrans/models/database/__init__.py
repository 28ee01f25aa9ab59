"""Database models package."""

from subtrans.models.database.base import (
    Base,
    async_session_maker,
    create_engine,
    create_session_maker,
    get_db,
    init_db,
)
from subtrans.models.database.cache_record import SubtitleCacheRecord
from subtrans.models.database.enums import SessionStatus

__all__ = [
    # Base
    "Base",
    "async_session_maker",
    "create_engine",
    "create_session_maker",
    "get_db",
    "init_db",
    # Models
    "SubtitleCacheRecord",
    # Enums
    "SessionStatus",
]
