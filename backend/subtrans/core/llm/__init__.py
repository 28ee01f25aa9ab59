"""LLM configuration."""

from .config_service import LLMConfigService, ResolvedLLMConfig

__all__ = ["LLMConfigService", "ResolvedLLMConfig"]
