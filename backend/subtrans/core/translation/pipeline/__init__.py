"""Translation pipeline components.

This module provides the per-batch pipeline components:
- BatchPlanner: Cuts the cue sequence into context windows
- PromptEngine: Builds the numbered generation request
- LLMGateway: Unified interface for the generation endpoint
- OutputProcessor: Reconciles numbered responses with cues
- TranslationClient: Runs one batch with rate-limit retries
- SourceFetcher: Retrieves subtitle documents
"""

from .batch_planner import BatchPlanner
from .llm_gateway import LiteLLMGateway, LLMGateway
from .output_processor import OutputProcessor
from .prompt_engine import PromptEngine
from .source_fetcher import SourceFetcher
from .translation_client import TranslationClient

__all__ = [
    "BatchPlanner",
    "PromptEngine",
    "LLMGateway",
    "LiteLLMGateway",
    "OutputProcessor",
    "TranslationClient",
    "SourceFetcher",
]
