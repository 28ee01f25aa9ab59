"""Translation package.

This package provides the subtitle translation pipeline and its controller.

Architecture:
- models/: Data models (ContentKey, TranslationBatch, PromptBundle, etc.)
- pipeline/: Per-batch components (BatchPlanner, PromptEngine, etc.)
- sessions.py: Transient session state and registry
- progress.py: Progress publish/subscribe
- orchestrator.py: PipelineController driving whole jobs (import it from
  the module; it depends on the cache store, which imports these models)
"""

from .errors import (
    EndpointError,
    MissingCredentialsError,
    ParseError,
    RateLimitedError,
    SourceFetchError,
    TranslationPipelineError,
)

# Re-export models for convenience
from .models import (
    # Context models
    ContentKey,
    Cue,
    Progress,
    TranslationBatch,
    TranslationJob,
    # Prompt models
    Message,
    PromptBundle,
    # Record models
    CacheRecord,
    CacheStatus,
    # Response models
    TokenUsage,
    LLMResponse,
    # Result models
    MatchStrategy,
    LineOutcome,
    BatchResult,
)

__all__ = [
    # Errors
    "TranslationPipelineError",
    "MissingCredentialsError",
    "SourceFetchError",
    "ParseError",
    "RateLimitedError",
    "EndpointError",
    # Models
    "ContentKey",
    "Cue",
    "Progress",
    "TranslationBatch",
    "TranslationJob",
    "Message",
    "PromptBundle",
    "CacheRecord",
    "CacheStatus",
    "TokenUsage",
    "LLMResponse",
    "MatchStrategy",
    "LineOutcome",
    "BatchResult",
]
