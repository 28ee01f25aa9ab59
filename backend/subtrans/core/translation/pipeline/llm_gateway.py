"""LLM Gateway for the generation endpoint.

This module provides an abstract gateway interface together with the
LiteLLM-backed implementation. Endpoint failures are translated into
pipeline errors here so that callers never see provider exceptions.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import litellm
import openai
from litellm import acompletion

from ..errors import EndpointError, RateLimitedError
from ..models.prompt import PromptBundle
from ..models.response import LLMResponse, TokenUsage
from subtrans.utils.text import safe_truncate

logger = logging.getLogger(__name__)


class LLMGateway(ABC):
    """Abstract gateway for the generation endpoint."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get provider name."""
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Get model identifier."""
        pass

    @abstractmethod
    async def call(self, bundle: PromptBundle) -> LLMResponse:
        """Make a single LLM call.

        Args:
            bundle: Prompt bundle with messages and configuration

        Returns:
            LLMResponse with content and metadata

        Raises:
            RateLimitedError: If the endpoint signals rate limiting
            EndpointError: On any other unsuccessful response
        """
        pass


class LiteLLMGateway(LLMGateway):
    """Gateway for all providers using LiteLLM."""

    def __init__(
        self,
        api_key: str,
        model: str,
        litellm_model: str,
        base_url: Optional[str] = None,
        provider_name: str = "gemini",
    ):
        """Initialize LiteLLM gateway.

        Args:
            api_key: API key for authentication
            model: Model identifier
            litellm_model: Model string with LiteLLM provider prefix
            base_url: Optional custom base URL for compatible APIs
            provider_name: Provider name for logging
        """
        self._api_key = api_key
        self._model = model
        self._litellm_model = litellm_model
        self._base_url = base_url
        self._provider = provider_name

        logger.info(
            f"[LLM Gateway] Initialized: provider={provider_name}, model={model}, "
            f"litellm_model={litellm_model}, base_url={base_url}"
        )

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    async def call(self, bundle: PromptBundle) -> LLMResponse:
        """Make LLM API call using LiteLLM.

        Retries are left to the caller, so LiteLLM's own retries are off.
        """
        start_time = time.time()

        kwargs: Dict[str, Any] = {
            "model": self._litellm_model,
            "messages": bundle.to_openai_format(),
            "temperature": bundle.temperature,
            "max_tokens": bundle.max_tokens,
            "api_key": self._api_key,
            "num_retries": 0,
        }
        if self._base_url:
            kwargs["api_base"] = self._base_url

        logger.debug(
            f"[LLM Gateway] Calling LiteLLM: model={self._litellm_model}, "
            f"lines={bundle.line_count}, ~{bundle.estimate_tokens()} tokens: "
            f"{safe_truncate(bundle.user_prompt or '', 300)}"
        )

        try:
            response = await acompletion(**kwargs)
        except litellm.RateLimitError as e:
            raise RateLimitedError(str(e)) from e
        except openai.APIError as e:
            raise EndpointError(
                f"Generation request failed: {e}",
                status_code=getattr(e, "status_code", None),
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            provider=self._provider,
            model=self._model,
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            latency_ms=latency_ms,
        )
