"""Translation pipeline data models.

This module provides structured data models for the translation pipeline,
ensuring clear contracts between components.
"""

from .context import ContentKey, Cue, Progress, TranslationBatch, TranslationJob
from .prompt import Message, PromptBundle
from .record import CacheRecord, CacheStatus
from .response import LLMResponse, TokenUsage
from .result import BatchResult, LineOutcome, MatchStrategy

__all__ = [
    # Context models
    "ContentKey",
    "Cue",
    "Progress",
    "TranslationBatch",
    "TranslationJob",
    # Prompt models
    "Message",
    "PromptBundle",
    # Record models
    "CacheRecord",
    "CacheStatus",
    # Response models
    "TokenUsage",
    "LLMResponse",
    # Result models
    "MatchStrategy",
    "LineOutcome",
    "BatchResult",
]
