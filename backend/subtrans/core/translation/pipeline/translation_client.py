"""Translation client: one planned batch in, per-cue outcomes out.

Composes the prompt engine, the gateway and the output processor, and
retries the same batch while the endpoint keeps signalling rate limiting.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)
from tenacity.stop import stop_base

from ..errors import RateLimitedError
from ..models.context import TranslationBatch
from ..models.result import BatchResult
from subtrans.utils.text import safe_truncate
from .llm_gateway import LLMGateway
from .output_processor import OutputProcessor
from .prompt_engine import PromptEngine

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class stop_when_cancelled(stop_base):
    """Stop retrying once the owning job has been cancelled."""

    def __init__(self, should_stop: Callable[[], bool]):
        self.should_stop = should_stop

    def __call__(self, retry_state: RetryCallState) -> bool:
        return self.should_stop()


class TranslationClient:
    """Translates planned batches against the generation endpoint."""

    def __init__(
        self,
        gateway: LLMGateway,
        temperature: float = 0.1,
        max_tokens: int = 4096,
        rate_limit_delay: float = 2.0,
        max_rate_limit_retries: Optional[int] = 30,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            gateway: Gateway to the generation endpoint
            temperature: Sampling temperature
            max_tokens: Response token limit
            rate_limit_delay: Fixed wait in seconds after a rate-limit signal
            max_rate_limit_retries: Retries of one batch before giving up,
                None to retry until cancelled
            sleep: Awaitable sleep used between retries
        """
        self.gateway = gateway
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.rate_limit_delay = rate_limit_delay
        self.max_rate_limit_retries = max_rate_limit_retries
        self._sleep = sleep

    def _stop_policy(self, should_stop: Optional[Callable[[], bool]]) -> stop_base:
        stop = (
            stop_never
            if self.max_rate_limit_retries is None
            else stop_after_attempt(self.max_rate_limit_retries + 1)
        )
        if should_stop is not None:
            stop = stop | stop_when_cancelled(should_stop)
        return stop

    @staticmethod
    def _log_rate_limit(retry_state: RetryCallState) -> None:
        logger.warning(
            "[Client] Rate limited (attempt %d), waiting %.1fs before retrying the batch",
            retry_state.attempt_number,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )

    async def translate_batch(
        self,
        batch: TranslationBatch,
        source_name: str,
        target_name: str,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> BatchResult:
        """Translate the uncached cues of one batch.

        Args:
            batch: Planned batch
            source_name: Display name of the source language
            target_name: Display name of the target language
            should_stop: Cancellation check consulted between retries

        Returns:
            BatchResult with one outcome per translatable cue

        Raises:
            RateLimitedError: If rate limiting persists past the retry policy
            EndpointError: If the endpoint fails for this batch
        """
        if batch.skipped:
            return BatchResult(outcomes=[], attempts=0)

        bundle = PromptEngine.build(
            batch,
            source_name,
            target_name,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        attempts = 0
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RateLimitedError),
            wait=wait_fixed(self.rate_limit_delay),
            stop=self._stop_policy(should_stop),
            sleep=self._sleep,
            before_sleep=self._log_rate_limit,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                attempts = attempt.retry_state.attempt_number
                response = await self.gateway.call(bundle)

        logger.debug(
            "[Client] Batch %d response after %d attempt(s): %s",
            batch.index, attempts, safe_truncate(response.content, 200),
        )
        outcomes = OutputProcessor.reconcile(response.content, batch.translatable)
        result = BatchResult(
            outcomes=outcomes,
            attempts=attempts,
            tokens_used=response.usage.total_tokens,
            raw_llm_response=response.content,
        )

        if result.failed:
            logger.info(
                "[Client] Batch %d: %d/%d lines recovered, left for next pass: %s",
                batch.index, len(result.translations), len(outcomes), result.failed,
            )
        return result
