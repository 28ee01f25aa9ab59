"""Pipeline Controller - runs resumable subtitle translation jobs."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Tuple

from subtrans.config import Settings, settings as default_settings
from subtrans.core.cache import CacheStore
from subtrans.core.llm import LLMConfigService, ResolvedLLMConfig
from subtrans.core.subtitles import CueParser
from subtrans.models.database.enums import SessionStatus
from subtrans.utils.text import preview_lines

from .errors import (
    EndpointError,
    MissingCredentialsError,
    ParseError,
    RateLimitedError,
    SourceFetchError,
)
from .languages import language_name
from .models import ContentKey, Progress, TranslationJob
from .pipeline import (
    BatchPlanner,
    LiteLLMGateway,
    LLMGateway,
    SourceFetcher,
    TranslationClient,
)
from .progress import ProgressTracker
from .sessions import InMemorySessionRegistry, PipelineSession, SessionRegistry

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[ResolvedLLMConfig], LLMGateway]
SleepFunc = Callable[[float], Awaitable[None]]


def litellm_gateway_factory(config: ResolvedLLMConfig) -> LLMGateway:
    """Build the LiteLLM gateway for a resolved configuration."""
    return LiteLLMGateway(
        api_key=config.api_key,
        model=config.model,
        litellm_model=config.get_litellm_model(),
        base_url=config.base_url,
        provider_name=config.provider,
    )


class PipelineController:
    """Drives one job per ContentKey through idle -> loading -> ready/error.

    The cache store is consulted first and written after every batch, so a
    job interrupted at any point resumes from the last persisted batch.
    Cancellation is cooperative: it is honoured at batch boundaries and
    while a batch is waiting out a rate limit.
    """

    def __init__(
        self,
        store: CacheStore,
        registry: Optional[SessionRegistry] = None,
        tracker: Optional[ProgressTracker] = None,
        fetcher: Optional[SourceFetcher] = None,
        gateway_factory: GatewayFactory = litellm_gateway_factory,
        settings: Optional[Settings] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.settings = settings or default_settings
        self.store = store
        self.registry = registry if registry is not None else InMemorySessionRegistry()
        self.tracker = tracker or ProgressTracker()
        self.fetcher = fetcher or SourceFetcher(timeout=self.settings.source_fetch_timeout)
        self.gateway_factory = gateway_factory
        self._sleep = sleep

    def get_session(self, key: ContentKey) -> Optional[PipelineSession]:
        """Return the session of a key, if this process has one."""
        return self.registry.get(key.cache_key)

    def prepare(self, job: TranslationJob) -> Tuple[PipelineSession, bool]:
        """Register a loading session for a job.

        Returns:
            The session and whether it is new. A job whose key is already
            loading re-attaches to the running session instead.
        """
        existing = self.registry.get(job.key.cache_key)
        if existing is not None and existing.is_active:
            logger.info(f"[Pipeline] Re-attaching to running session {existing.session_id}")
            return existing, False

        session = PipelineSession(key=job.key, status=SessionStatus.LOADING)
        self.registry.set(session)
        logger.info(f"[Pipeline] Session {session.session_id} loading")
        return session, True

    async def run(self, job: TranslationJob) -> PipelineSession:
        """Start or resume a job and wait for it to settle.

        If the key is already loading, the running session is returned
        without starting a second writer.
        """
        session, created = self.prepare(job)
        if not created:
            return session
        await self.execute(session, job)
        return session

    async def execute(self, session: PipelineSession, job: TranslationJob) -> None:
        """Run a prepared session to its end state. Never raises."""
        try:
            await self._execute(session, job)
        except (MissingCredentialsError, SourceFetchError, ParseError) as e:
            logger.error(f"[Pipeline] {job.key}: {e}")
            await self._settle(session, SessionStatus.ERROR, str(e))
        except Exception as e:
            logger.exception(f"[Pipeline] Unexpected failure for {job.key}")
            await self._settle(session, SessionStatus.ERROR, f"Unexpected error: {e}")

    async def _execute(self, session: PipelineSession, job: TranslationJob) -> None:
        key = job.key

        record = await self.store.load(key)
        if record is not None:
            session.translations = dict(record.translations)
            session.progress = Progress(current=record.current, total=record.total)
            if record.completed:
                logger.info(
                    f"[Pipeline] {key} already completed, "
                    f"{len(record.translations)} cached translations"
                )
                await self._settle(session, SessionStatus.READY)
                return

        config = LLMConfigService.resolve_config(api_key=job.api_key, settings=self.settings)

        document = await self._load_document(job)
        if session.cancelled:
            await self._settle(session, SessionStatus.IDLE)
            return

        cues = CueParser.parse(document)
        total = len(cues)
        batches = BatchPlanner.plan(
            cues,
            self.settings.batch_size,
            self.settings.context_size,
            existing=session.translations.keys(),
        )
        logger.info(
            f"[Pipeline] {key}: {total} cues, {len(batches)} batches, "
            f"{len(session.translations)} already cached"
        )
        logger.debug(f"[Pipeline] First cues: {preview_lines([c.text for c in cues])}")

        client = TranslationClient(
            self.gateway_factory(config),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            rate_limit_delay=self.settings.rate_limit_delay,
            max_rate_limit_retries=self.settings.max_rate_limit_retries,
            sleep=self._sleep,
        )
        source_name = language_name(key.source_lang)
        target_name = language_name(key.target_lang)
        session.progress = Progress(current=0, total=total)

        for position, batch in enumerate(batches):
            if session.cancelled:
                logger.info(f"[Pipeline] {key} cancelled before batch {batch.index}")
                await self._settle(session, SessionStatus.IDLE)
                return

            new_translations: Dict[str, str] = {}
            if not batch.skipped:
                try:
                    result = await client.translate_batch(
                        batch,
                        source_name,
                        target_name,
                        should_stop=lambda: session.cancelled,
                    )
                    new_translations = result.translations
                except EndpointError as e:
                    logger.warning(
                        f"[Pipeline] Batch {batch.index} of {key} skipped: {e}"
                    )
                except RateLimitedError:
                    logger.warning(
                        f"[Pipeline] Batch {batch.index} of {key} still rate limited, "
                        "leaving it for the next pass"
                    )

            session.progress = Progress(current=min(batch.end, total), total=total)
            merged = await self.store.merge(key, new_translations, session.progress)
            session.translations = dict(merged.translations)
            await self.tracker.broadcast(session.session_id, session.to_event())

            if not batch.skipped and position < len(batches) - 1:
                await self._sleep(self.settings.batch_delay)

        if session.cancelled:
            logger.info(f"[Pipeline] {key} cancelled during the last batch")
            await self._settle(session, SessionStatus.IDLE)
            return

        record = await self.store.finalize(key)
        if record is not None:
            session.translations = dict(record.translations)
        logger.info(
            f"[Pipeline] {key} ready: {len(session.translations)}/{total} cues translated"
        )
        await self._settle(session, SessionStatus.READY)

    async def _load_document(self, job: TranslationJob) -> str:
        if job.document is not None:
            return job.document
        if not job.subtitle_url:
            raise SourceFetchError("No subtitle URL or document given")
        return await self.fetcher.fetch(job.subtitle_url)

    async def _settle(
        self,
        session: PipelineSession,
        status: SessionStatus,
        error_message: Optional[str] = None,
    ) -> None:
        session.status = status
        session.error_message = error_message
        await self.tracker.broadcast(session.session_id, session.to_event())

    def forget(self, key: ContentKey) -> bool:
        """Drop the settled session of a key. Loading sessions are kept.

        Returns:
            Whether a session was dropped
        """
        session = self.registry.get(key.cache_key)
        if session is None or session.is_active:
            return False
        self.registry.remove(session.session_id)
        return True

    def forget_settled(self) -> int:
        """Drop every settled session; the store stays authoritative."""
        settled = [s for s in self.registry.all() if not s.is_active]
        for session in settled:
            self.registry.remove(session.session_id)
        if settled:
            logger.info(f"[Pipeline] Dropped {len(settled)} settled sessions")
        return len(settled)

    def cancel(self, session_id: str) -> bool:
        """Flag one active session as cancelled."""
        session = self.registry.get(session_id)
        if session is None or not session.is_active:
            return False
        session.cancelled = True
        logger.info(f"[Pipeline] Cancellation requested for {session_id}")
        return True

    def cancel_all(self) -> int:
        """Flag every active session as cancelled. Cached progress is kept.

        Returns:
            Number of sessions flagged
        """
        sessions = self.registry.active()
        for session in sessions:
            session.cancelled = True
        if sessions:
            logger.info(f"[Pipeline] Cancellation requested for {len(sessions)} sessions")
        return len(sessions)
