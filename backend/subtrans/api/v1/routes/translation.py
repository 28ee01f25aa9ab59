"""Translation API routes."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query
from pydantic import BaseModel, Field

from subtrans.api.dependencies import Controller, OptionalAuth, RequireAuth, Store
from subtrans.config import settings
from subtrans.core.translation.languages import LANGUAGE_NAMES
from subtrans.core.translation.models import CacheRecord, ContentKey, TranslationJob
from subtrans.core.translation.sessions import PipelineSession
from subtrans.models.database.enums import SessionStatus

logger = logging.getLogger(__name__)

router = APIRouter()


class StartTranslationRequest(BaseModel):
    """Request to start or resume translating one piece of content."""
    content_id: str = Field(..., min_length=1)
    source_lang: str = Field(..., min_length=1)
    target_lang: Optional[str] = None  # None = configured default
    # Subtitle source: a URL to fetch, or the document itself
    subtitle_url: Optional[str] = None
    document: Optional[str] = None
    api_key: Optional[str] = None  # Overrides the configured key


class SessionResponse(BaseModel):
    """Session state response."""
    session_id: str
    content_id: str
    source_lang: str
    target_lang: str
    status: SessionStatus
    current: int = 0
    total: int = 0
    percent: int = 0
    translated_count: int = 0
    completed: bool = False
    error_message: Optional[str] = None
    reattached: bool = False

    @classmethod
    def from_session(cls, session: PipelineSession, reattached: bool = False) -> "SessionResponse":
        key = session.key
        return cls(
            session_id=session.session_id,
            content_id=key.content_id,
            source_lang=key.source_lang,
            target_lang=key.target_lang,
            status=session.status,
            current=session.progress.current,
            total=session.progress.total,
            percent=session.progress.percent,
            translated_count=len(session.translations),
            completed=session.status == SessionStatus.READY,
            error_message=session.error_message,
            reattached=reattached,
        )

    @classmethod
    def from_record(cls, key: ContentKey, record: Optional[CacheRecord]) -> "SessionResponse":
        """Idle view for a key with no session in this process."""
        response = cls(
            session_id=key.cache_key,
            content_id=key.content_id,
            source_lang=key.source_lang,
            target_lang=key.target_lang,
            status=SessionStatus.IDLE,
        )
        if record is not None:
            response.current = record.current
            response.total = record.total
            response.percent = min(100, record.percent_complete)
            response.translated_count = len(record.translations)
            response.completed = record.completed
        return response


class TranslationsResponse(BaseModel):
    """Full current mapping of a job."""
    session_id: str
    status: SessionStatus
    translations: Dict[str, str]


class LookupResponse(BaseModel):
    """Exact lookup result."""
    text: str
    found: bool
    translation: Optional[str] = None


class LanguageInfo(BaseModel):
    code: str
    name: str


class LanguagesResponse(BaseModel):
    languages: List[LanguageInfo]
    default_target: str


def _content_key(content_id: str, source_lang: str, target_lang: str) -> ContentKey:
    if not content_id or not source_lang or not target_lang:
        raise HTTPException(status_code=400, detail="content_id, source_lang and target_lang are required")
    return ContentKey(content_id=content_id, source_lang=source_lang, target_lang=target_lang)


@router.post("/translation/start")
async def start_translation(
    request: StartTranslationRequest,
    background_tasks: BackgroundTasks,
    controller: Controller,
    _auth: RequireAuth,
) -> SessionResponse:
    """Start or resume a translation job.

    The job runs in the background; poll the session endpoint for progress.
    Starting a job whose key is already loading re-attaches to it.
    """
    if not request.subtitle_url and request.document is None:
        raise HTTPException(status_code=400, detail="Provide subtitle_url or document")

    key = _content_key(
        request.content_id,
        request.source_lang,
        request.target_lang or settings.default_target_language,
    )
    job = TranslationJob(
        key=key,
        subtitle_url=request.subtitle_url,
        document=request.document,
        api_key=request.api_key,
    )

    session, created = controller.prepare(job)
    if created:
        background_tasks.add_task(controller.execute, session, job)
        logger.info(f"[API] Started translation job {key}")

    return SessionResponse.from_session(session, reattached=not created)


@router.get("/translation/session/{content_id}/{source_lang}/{target_lang}")
async def get_session(
    content_id: str,
    source_lang: str,
    target_lang: str,
    controller: Controller,
    store: Store,
    _auth: OptionalAuth,
) -> SessionResponse:
    """Get the state of a job.

    Without a session in this process, an idle view is derived from the
    persisted cache record.
    """
    key = _content_key(content_id, source_lang, target_lang)
    session = controller.get_session(key)
    if session is not None:
        return SessionResponse.from_session(session)
    return SessionResponse.from_record(key, await store.load(key))


@router.get("/translation/session/{content_id}/{source_lang}/{target_lang}/translations")
async def get_session_translations(
    content_id: str,
    source_lang: str,
    target_lang: str,
    controller: Controller,
    store: Store,
    _auth: OptionalAuth,
) -> TranslationsResponse:
    """Get the full current original -> translation mapping of a job."""
    key = _content_key(content_id, source_lang, target_lang)
    session = controller.get_session(key)
    if session is not None:
        return TranslationsResponse(
            session_id=session.session_id,
            status=session.status,
            translations=dict(session.translations),
        )

    record = await store.load(key)
    if record is None:
        raise HTTPException(status_code=404, detail="No translations for this content")
    return TranslationsResponse(
        session_id=key.cache_key,
        status=SessionStatus.IDLE,
        translations=record.translations,
    )


@router.get("/translation/lookup")
async def lookup_translation(
    store: Store,
    _auth: OptionalAuth,
    content_id: str = Query(..., min_length=1),
    source_lang: str = Query(..., min_length=1),
    target_lang: str = Query(..., min_length=1),
    text: str = Query(...),
) -> LookupResponse:
    """Look up the cached translation of an exactly matching source string."""
    key = _content_key(content_id, source_lang, target_lang)
    translation = await store.lookup(key, text)
    return LookupResponse(text=text, found=translation is not None, translation=translation)


@router.post("/translation/cancel")
async def cancel_translations(
    controller: Controller,
    _auth: RequireAuth,
):
    """Cancel every active job at its next batch boundary.

    Progress already cached is kept.
    """
    count = controller.cancel_all()
    return {"cancelled": count}


@router.get("/translation/languages")
async def get_languages() -> LanguagesResponse:
    """List the language codes with display names used in prompts."""
    return LanguagesResponse(
        languages=[LanguageInfo(code=code, name=name) for code, name in LANGUAGE_NAMES.items()],
        default_target=settings.default_target_language,
    )
