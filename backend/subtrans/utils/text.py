"""Text utilities for log-safe string handling."""

from typing import Iterable


def safe_truncate(text: str, max_chars: int, suffix: str = "...") -> str:
    """Truncate text for logging, preferring a word boundary.

    Args:
        text: Text to truncate
        max_chars: Maximum characters (excluding suffix)
        suffix: Suffix to append if truncated (default "...")

    Returns:
        Truncated text with suffix if needed
    """
    if not text or len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    # Look back up to 20 characters for a good break point
    break_chars = {" ", "\n", "\t", ",", ".", "!", "?", ";", ":", "-"}
    for i in range(min(20, max_chars - 1), 0, -1):
        if truncated[-i] in break_chars:
            truncated = truncated[: -(i - 1) or None].rstrip()
            break

    return truncated + suffix


def preview_lines(lines: Iterable[str], max_lines: int = 3, max_chars: int = 60) -> str:
    """Render the first few lines of a sequence as a one-line log preview.

    Args:
        lines: Lines to preview
        max_lines: Maximum number of lines shown
        max_chars: Per-line truncation limit

    Returns:
        Preview string such as ``"a" | "b" (+3 more)``
    """
    items = list(lines)
    shown = [f'"{safe_truncate(line, max_chars)}"' for line in items[:max_lines]]
    rest = len(items) - len(shown)
    preview = " | ".join(shown)
    if rest > 0:
        preview += f" (+{rest} more)"
    return preview
