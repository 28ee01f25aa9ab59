"""Batch planning over the parsed cue sequence."""

import logging
from typing import Iterable, List, Optional, Sequence

from ..models.context import Cue, TranslationBatch

logger = logging.getLogger(__name__)


class BatchPlanner:
    """Cuts the cue sequence into fixed-size windows with surrounding context.

    Windows are computed over the full sequence, cached cues included, so a
    window and its context are identical across resumed runs. Cached cues
    are only filtered out of each window's translatable set.
    """

    @staticmethod
    def plan(
        cues: Sequence[Cue],
        batch_size: int,
        context_size: int,
        existing: Optional[Iterable[str]] = None,
    ) -> List[TranslationBatch]:
        """Plan the batches for one pass.

        Args:
            cues: Full ordered cue sequence
            batch_size: Cues per window (N)
            context_size: Neighbouring cues on each side (C)
            existing: Source strings already present in the cache mapping

        Returns:
            One batch per window, in order. Windows whose cues are all cached
            are returned with an empty translatable set.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if context_size < 0:
            raise ValueError("context_size must not be negative")

        done = set(existing or ())
        texts = [cue.text for cue in cues]
        total = len(texts)

        batches: List[TranslationBatch] = []
        for number, start in enumerate(range(0, total, batch_size)):
            end = min(start + batch_size, total)
            batches.append(
                TranslationBatch(
                    index=number,
                    start=start,
                    end=end,
                    translatable=[t for t in texts[start:end] if t not in done],
                    context_before=texts[max(0, start - context_size):start],
                    context_after=texts[start + batch_size:min(total, start + batch_size + context_size)],
                )
            )

        skipped = sum(1 for b in batches if b.skipped)
        logger.debug(
            "[Planner] %d cues -> %d batches (%d fully cached)",
            total, len(batches), skipped,
        )
        return batches
