"""Translation context models.

This module defines the input data structures for the translation pipeline:
the identity of a translation job, the parsed cues and the batches planned
over them.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

CACHE_KEY_PREFIX = "subtrans_cache_"


class ContentKey(BaseModel):
    """Identity of one translation job.

    Two keys that differ only in target language are independent jobs.
    """

    model_config = ConfigDict(frozen=True)

    content_id: str = Field(..., min_length=1, description="Content identifier")
    source_lang: str = Field(..., min_length=1, description="Source language code")
    target_lang: str = Field(..., min_length=1, description="Target language code")

    @property
    def cache_key(self) -> str:
        """Deterministic storage key for this job."""
        return f"{CACHE_KEY_PREFIX}{self.content_id}_{self.source_lang}_{self.target_lang}"

    def __str__(self) -> str:
        return f"{self.content_id} [{self.source_lang}->{self.target_lang}]"


class Cue(BaseModel):
    """One unique line of source text."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Cleaned cue text")
    index: int = Field(..., ge=0, description="First-seen ordinal position")


class Progress(BaseModel):
    """Progress counters for a job."""

    current: int = Field(default=0, ge=0, description="Cues attempted so far")
    total: int = Field(default=0, ge=0, description="Total cue count once known")

    @property
    def percent(self) -> int:
        """Attempted share as a rounded percentage."""
        if not self.total:
            return 0
        return round(100 * self.current / self.total)


class TranslationBatch(BaseModel):
    """A window of cues planned for one generation request.

    Windows are cut over the full cue sequence; ``translatable`` holds only
    the cues of the window that are not cached yet. The context lists are
    read-only neighbours and are never translated in this request.
    """

    index: int = Field(..., ge=0, description="Window number")
    start: int = Field(..., ge=0, description="Index of the first cue in the window")
    end: int = Field(..., ge=0, description="Index one past the last cue in the window")
    translatable: List[str] = Field(
        default_factory=list, description="Uncached cues to translate"
    )
    context_before: List[str] = Field(
        default_factory=list, description="Cues preceding the window"
    )
    context_after: List[str] = Field(
        default_factory=list, description="Cues following the window"
    )

    @property
    def size(self) -> int:
        """Number of cues in the window, cached or not."""
        return self.end - self.start

    @property
    def skipped(self) -> bool:
        """Whether every cue in the window is already cached."""
        return not self.translatable


class TranslationJob(BaseModel):
    """Request to start or resume translating one piece of content."""

    key: ContentKey
    subtitle_url: Optional[str] = Field(
        default=None, description="Where to retrieve the subtitle document"
    )
    document: Optional[str] = Field(
        default=None, description="Subtitle document supplied inline"
    )
    api_key: Optional[str] = Field(
        default=None, description="Generation endpoint key for this job"
    )
