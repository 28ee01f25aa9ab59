"""Translation result models.

Reconciliation of a free-text response yields one outcome per cue; a batch
result collects them together with request metadata.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MatchStrategy(str, Enum):
    """How a translation was recovered from the response."""

    NUMBERED = "numbered"  # "<j>. text" line found
    POSITIONAL = "positional"  # j-th non-empty line used
    NONE = "none"  # nothing usable


class LineOutcome(BaseModel):
    """Reconciliation outcome for one cue."""

    position: int = Field(..., ge=1, description="1-based number in the prompt")
    original: str = Field(..., description="Source cue text")
    translated: Optional[str] = Field(default=None, description="Recovered translation")
    strategy: MatchStrategy = Field(default=MatchStrategy.NONE)

    @property
    def success(self) -> bool:
        return bool(self.translated)


class BatchResult(BaseModel):
    """Outcome of one translated batch."""

    outcomes: List[LineOutcome] = Field(default_factory=list)
    attempts: int = Field(default=1, description="Requests issued, including rate-limit retries")
    tokens_used: int = Field(default=0, description="Total tokens consumed")
    raw_llm_response: Optional[str] = Field(
        default=None, description="Raw response before reconciliation"
    )

    @property
    def translations(self) -> Dict[str, str]:
        """Successfully reconciled cues as an original -> translation mapping."""
        return {o.original: o.translated for o in self.outcomes if o.success}

    @property
    def failed(self) -> List[str]:
        """Cues left untranslated by this batch."""
        return [o.original for o in self.outcomes if not o.success]
