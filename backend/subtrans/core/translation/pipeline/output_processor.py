"""Reconciliation of numbered free-text responses.

The endpoint is asked to answer with one numbered line per cue, but the
answer is free text. Two independent strategies recover translations from
it: a strict numbered match, then a positional fallback.
"""

import re
from typing import List, Optional, Sequence

from ..models.result import LineOutcome, MatchStrategy

_NUMBER_PREFIX = re.compile(r'^(?:\d+\.)?\s*"?')
_LEADING_NUMBER = re.compile(r"^(\d+)\.")
_TRAILING_QUOTE = re.compile(r'"?\s*$')


def response_lines(response_text: str) -> List[str]:
    """Split a response into its non-empty lines."""
    return [line for line in response_text.split("\n") if line.strip()]


def match_numbered(lines: Sequence[str], position: int) -> Optional[str]:
    """Find the line numbered ``position`` ("3. text", optionally quoted).

    Returns:
        The captured text, trimmed, or None if no line carries that number
    """
    pattern = re.compile(rf'^{position}\.\s*"?(.+?)"?$')
    for line in lines:
        match = pattern.match(line.strip())
        if match:
            text = match.group(1).strip()
            if text:
                return text
    return None


def match_positional(lines: Sequence[str], position: int) -> Optional[str]:
    """Use the ``position``-th non-empty line with any number and quotes removed.

    A line explicitly numbered for another position belongs to that cue and
    is never borrowed.
    """
    if position < 1 or position > len(lines):
        return None
    line = lines[position - 1].strip()
    numbered = _LEADING_NUMBER.match(line)
    if numbered and int(numbered.group(1)) != position:
        return None
    text = _NUMBER_PREFIX.sub("", line)
    text = _TRAILING_QUOTE.sub("", text).strip()
    return text or None


class OutputProcessor:
    """Turns a raw response into one outcome per requested cue."""

    @staticmethod
    def reconcile(response_text: str, cues: Sequence[str]) -> List[LineOutcome]:
        """Reconcile a response against the cues that were numbered 1..k.

        Args:
            response_text: Raw endpoint output
            cues: Source cues in the order they were numbered

        Returns:
            One LineOutcome per cue; unrecovered cues have no translation
        """
        lines = response_lines(response_text or "")
        outcomes: List[LineOutcome] = []

        for position, original in enumerate(cues, start=1):
            translated = match_numbered(lines, position)
            strategy = MatchStrategy.NUMBERED
            if translated is None:
                translated = match_positional(lines, position)
                strategy = MatchStrategy.POSITIONAL
            if translated is None:
                strategy = MatchStrategy.NONE

            outcomes.append(
                LineOutcome(
                    position=position,
                    original=original,
                    translated=translated,
                    strategy=strategy,
                )
            )

        return outcomes
