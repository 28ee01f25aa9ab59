"""Cache management API routes."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from subtrans.api.dependencies import Controller, OptionalAuth, RequireAuth, Store
from subtrans.core.translation.models import CacheStatus, ContentKey

logger = logging.getLogger(__name__)

router = APIRouter()


class CacheRecordSummary(BaseModel):
    """Stored record without its mapping."""
    cache_key: str
    content_id: str
    source_lang: str
    target_lang: str
    entries: int
    total: int
    current: int
    percent_complete: int
    completed: bool
    updated_at: Optional[datetime] = None


class CacheClearResponse(BaseModel):
    """Cache clear response."""
    entries_deleted: int
    action: str


@router.get("/cache/status")
async def get_cache_status(
    store: Store,
    _auth: OptionalAuth,
    content_id: str = Query(..., min_length=1),
    source_lang: str = Query(..., min_length=1),
    target_lang: str = Query(..., min_length=1),
) -> CacheStatus:
    """Get the persisted status of a job.

    Works whether or not a job is running in this process.
    """
    key = ContentKey(content_id=content_id, source_lang=source_lang, target_lang=target_lang)
    return await store.status(key)


@router.get("/cache/records")
async def list_cache_records(
    store: Store,
    _auth: OptionalAuth,
) -> List[CacheRecordSummary]:
    """List stored records, most recently updated first."""
    records = await store.list_records()
    return [
        CacheRecordSummary(
            cache_key=record.key.cache_key,
            content_id=record.content_id,
            source_lang=record.source_lang,
            target_lang=record.target_lang,
            entries=len(record.translations),
            total=record.total,
            current=record.current,
            percent_complete=min(100, record.percent_complete),
            completed=record.completed,
            updated_at=record.updated_at,
        )
        for record in records
    ]


@router.delete("/cache/{content_id}/{source_lang}/{target_lang}")
async def delete_cache_record(
    content_id: str,
    source_lang: str,
    target_lang: str,
    store: Store,
    controller: Controller,
    _auth: RequireAuth,
) -> CacheClearResponse:
    """Delete the record of one job. The next run starts from scratch.

    A settled session of the job is dropped with it; a running job keeps going.
    """
    key = ContentKey(content_id=content_id, source_lang=source_lang, target_lang=target_lang)
    deleted = await store.delete(key)
    controller.forget(key)
    if not deleted:
        raise HTTPException(status_code=404, detail="Cache record not found")
    return CacheClearResponse(entries_deleted=1, action="delete")


@router.post("/cache/clear")
async def clear_cache(
    store: Store,
    controller: Controller,
    _auth: RequireAuth,
) -> CacheClearResponse:
    """Delete every stored record and the settled sessions built from them."""
    count = await store.clear_all()
    controller.forget_settled()
    return CacheClearResponse(entries_deleted=count, action="clear_all")
