"""Cue parser for WebVTT-style subtitle documents.

Turns a raw captioning document into the ordered sequence of unique text
lines that the pipeline translates. Timing, numbering and styling are
discarded; only the spoken text survives.
"""

import logging
import re
from typing import List

from subtrans.core.translation.errors import ParseError
from subtrans.core.translation.models import Cue

logger = logging.getLogger(__name__)


class CueParser:
    """Extracts unique cue texts from a subtitle document.

    Structural lines (header, numeric indices, timing lines, NOTE/STYLE
    blocks and blank lines) act as separators: each one flushes the lines
    collected so far into a single cue, joined with a space.
    """

    HEADER = "WEBVTT"
    TIMING_ARROW = "-->"
    BLOCK_PREFIXES = ("NOTE", "STYLE")
    BOM = "\ufeff"

    INDEX_PATTERN = re.compile(r"^\d+$")
    TAG_PATTERN = re.compile(r"<[^>]*>")

    ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "nbsp": " "}
    ENTITY_PATTERN = re.compile(r"&(amp|lt|gt|nbsp);")

    @classmethod
    def is_separator(cls, line: str) -> bool:
        """Check whether a trimmed line is structural rather than text."""
        return (
            line == ""
            or line == cls.HEADER
            or cls.TIMING_ARROW in line
            or bool(cls.INDEX_PATTERN.match(line))
            or line.startswith(cls.BLOCK_PREFIXES)
        )

    @classmethod
    def clean_line(cls, line: str) -> str:
        """Strip inline markup, then decode the standard entities in one pass.

        Brackets produced by decoding ("&lt;3") are text, not markup.
        """
        text = cls.TAG_PATTERN.sub("", line.strip())
        text = cls.ENTITY_PATTERN.sub(lambda m: cls.ENTITIES[m.group(1)], text)
        return text.strip()

    @classmethod
    def parse(cls, document: str) -> List[Cue]:
        """Parse a document into ordered unique cues.

        Args:
            document: Raw subtitle document text

        Returns:
            Cues in first-seen order, without duplicates

        Raises:
            ParseError: If the document is empty or yields no cues
        """
        if not document or not document.strip():
            raise ParseError("Subtitle document is empty")

        texts: List[str] = []
        buffer: List[str] = []

        def flush() -> None:
            if buffer:
                texts.append(" ".join(buffer))
                buffer.clear()

        for raw_line in document.lstrip(cls.BOM).split("\n"):
            line = raw_line.strip()
            if cls.is_separator(line):
                flush()
                continue
            # Markup-only lines such as "<i>12</i>" must not survive as text
            # that would read as structure when parsed again
            cleaned = cls.clean_line(line)
            if cls.is_separator(cleaned):
                flush()
                continue
            buffer.append(cleaned)
        flush()

        # dict preserves first-seen order
        unique = list(dict.fromkeys(texts))
        if not unique:
            raise ParseError("No subtitle text found in document")

        logger.debug(
            "[Parser] %d text blocks -> %d unique cues", len(texts), len(unique)
        )
        return [Cue(text=text, index=i) for i, text in enumerate(unique)]

    @staticmethod
    def escape(text: str) -> str:
        return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    @classmethod
    def render(cls, texts: List[str]) -> str:
        """Render cue texts back into a minimal document, one cue per block.

        Parsing the result yields ``texts`` again.
        """
        return "\n\n".join(cls.escape(text) for text in texts)


def parse_cues(document: str) -> List[str]:
    """Parse a document and return just the cue texts."""
    return [cue.text for cue in CueParser.parse(document)]
