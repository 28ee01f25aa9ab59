"""Persistent, incremental translation cache.

One row per ContentKey holds the original -> translation mapping together
with the progress counters of the last run. The store is the only writer of
these rows; merges for the same key are serialised with a per-key lock and
performed inside a single transaction, so overlapping runs cannot drop each
other's results.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from subtrans.core.translation.models import CacheRecord, CacheStatus, ContentKey, Progress
from subtrans.models.database.cache_record import SubtitleCacheRecord

logger = logging.getLogger(__name__)


class CacheStore:
    """Keyed store of incremental translation records."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        """Initialize the store.

        Args:
            session_maker: Factory for database sessions
        """
        self._session_maker = session_maker
        # cache_key -> (lock, number of holders and waiters)
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _locked(self, key: ContentKey) -> AsyncIterator[None]:
        """Hold the lock of one key; it is discarded once nobody uses it."""
        name = key.cache_key
        lock, users = self._locks.get(name, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[name] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[name]
            if users == 1:
                del self._locks[name]
            else:
                self._locks[name] = (lock, users - 1)

    async def load(self, key: ContentKey) -> Optional[CacheRecord]:
        """Load the record for a key.

        Returns:
            Snapshot of the record, or None if nothing is stored
        """
        async with self._session_maker() as session:
            row = await session.get(SubtitleCacheRecord, key.cache_key)
            if row is None:
                return None
            return CacheRecord.model_validate(row)

    async def merge(
        self,
        key: ContentKey,
        translations: Mapping[str, str],
        progress: Optional[Progress] = None,
    ) -> CacheRecord:
        """Additively merge new translations and progress into a record.

        Empty translations are ignored and never replace a stored value.
        ``current`` never decreases; ``completed`` is left untouched.

        Args:
            key: Job identity
            translations: Newly obtained original -> translation pairs
            progress: Progress counters of the running job

        Returns:
            Snapshot of the record after the merge
        """
        async with self._locked(key):
            async with self._session_maker() as session:
                async with session.begin():
                    row = await session.get(
                        SubtitleCacheRecord, key.cache_key, with_for_update=True
                    )
                    if row is None:
                        row = SubtitleCacheRecord(
                            cache_key=key.cache_key,
                            content_id=key.content_id,
                            source_lang=key.source_lang,
                            target_lang=key.target_lang,
                            translations={},
                            total=0,
                            current=0,
                            completed=False,
                        )
                        session.add(row)

                    merged = dict(row.translations or {})
                    added = 0
                    for original, translated in translations.items():
                        if not translated or not translated.strip():
                            continue
                        if original not in merged:
                            added += 1
                        merged[original] = translated
                    # Reassign so the JSON column is flagged dirty
                    row.translations = merged

                    if progress is not None:
                        if progress.total:
                            row.total = progress.total
                        row.current = max(row.current or 0, progress.current)
                        if row.total:
                            row.current = min(row.current, row.total)
                    row.updated_at = datetime.now(timezone.utc)

                record = CacheRecord.model_validate(row)

        logger.debug(
            "[Cache] Merged %s: +%d entries (%d total), progress %d/%d",
            key, added, len(record.translations), record.current, record.total,
        )
        return record

    async def finalize(self, key: ContentKey) -> Optional[CacheRecord]:
        """Mark a record as completed after a full pass over all batches.

        Returns:
            Snapshot of the finalized record, or None if no record exists
        """
        async with self._locked(key):
            async with self._session_maker() as session:
                async with session.begin():
                    row = await session.get(
                        SubtitleCacheRecord, key.cache_key, with_for_update=True
                    )
                    if row is None:
                        logger.warning("[Cache] Cannot finalize missing record %s", key)
                        return None
                    row.completed = True
                    if row.total:
                        row.current = row.total
                    row.updated_at = datetime.now(timezone.utc)
                record = CacheRecord.model_validate(row)

        logger.info(
            "[Cache] Finalized %s: %d/%d cues translated",
            key, len(record.translations), record.total,
        )
        return record

    async def status(self, key: ContentKey) -> CacheStatus:
        """Derive the status view of a key from its stored record."""
        return CacheStatus.from_record(await self.load(key))

    async def lookup(self, key: ContentKey, text: str) -> Optional[str]:
        """Return the stored translation of an exact source string."""
        record = await self.load(key)
        if record is None:
            return None
        return record.translations.get(text)

    async def list_records(self) -> List[CacheRecord]:
        """List every stored record, most recently updated first."""
        async with self._session_maker() as session:
            result = await session.execute(
                select(SubtitleCacheRecord).order_by(SubtitleCacheRecord.updated_at.desc())
            )
            return [CacheRecord.model_validate(row) for row in result.scalars().all()]

    async def delete(self, key: ContentKey) -> bool:
        """Delete the record of one key.

        Returns:
            True if a record was removed
        """
        async with self._locked(key):
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(SubtitleCacheRecord).where(
                            SubtitleCacheRecord.cache_key == key.cache_key
                        )
                    )
        removed = result.rowcount > 0
        if removed:
            logger.info("[Cache] Deleted record %s", key)
        return removed

    async def clear_all(self) -> int:
        """Delete every stored record.

        Returns:
            Number of records removed
        """
        async with self._session_maker() as session:
            async with session.begin():
                count = await session.scalar(
                    select(func.count()).select_from(SubtitleCacheRecord)
                )
                await session.execute(delete(SubtitleCacheRecord))
        logger.info("[Cache] Cleared %d records", count or 0)
        return count or 0
