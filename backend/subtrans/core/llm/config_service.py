"""LLM configuration resolution.

Resolves the generation endpoint settings for a job. The API key is taken
from the first of these that is set:

1. The key supplied with the request
2. The ``GEMINI_API_KEY`` setting (environment or ``.env``)
3. The provider's environment variable at call time
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from subtrans.config import Settings, settings as default_settings
from subtrans.core.translation.errors import MissingCredentialsError

logger = logging.getLogger(__name__)


@dataclass
class ResolvedLLMConfig:
    """Resolved LLM configuration ready for use."""
    provider: str
    model: str
    api_key: str
    base_url: Optional[str] = None
    temperature: float = 0.1
    max_tokens: int = 4096

    def get_litellm_model(self) -> str:
        """Get model string in LiteLLM format."""
        provider_prefixes = {
            "openai": "",  # No prefix for OpenAI
            "anthropic": "anthropic/",
            "gemini": "gemini/",
            "deepseek": "deepseek/",
            "ollama": "ollama/",
            "openrouter": "openrouter/",
        }
        prefix = provider_prefixes.get(self.provider, f"{self.provider}/")
        if self.model.startswith(prefix):
            return self.model
        return f"{prefix}{self.model}"


class LLMConfigService:
    """Service for resolving LLM configurations."""

    # Environment variable mapping for each provider
    ENV_VAR_MAP = {
        "openai": "OPENAI_API_KEY",
        "anthropic": "ANTHROPIC_API_KEY",
        "gemini": "GEMINI_API_KEY",
        "deepseek": "DEEPSEEK_API_KEY",
    }

    @classmethod
    def resolve_config(
        cls,
        *,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> ResolvedLLMConfig:
        """Resolve the configuration for one job.

        Args:
            api_key: Key supplied by the caller, highest priority
            settings: Settings to read defaults from

        Raises:
            MissingCredentialsError: If no API key can be found
        """
        settings = settings or default_settings
        provider = settings.llm_provider.lower()

        key = api_key or settings.gemini_api_key
        if not key:
            env_var = cls.ENV_VAR_MAP.get(provider)
            key = os.getenv(env_var) if env_var else None
        if not key:
            raise MissingCredentialsError(
                f"No API key configured for provider '{provider}'. "
                "Pass one with the request or set GEMINI_API_KEY."
            )

        resolved = ResolvedLLMConfig(
            provider=provider,
            model=settings.llm_model,
            api_key=key,
            base_url=settings.llm_base_url,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
        logger.debug(
            f"[Config Service] Resolved config: provider={resolved.provider}, "
            f"model={resolved.model}, base_url={resolved.base_url}"
        )
        return resolved
