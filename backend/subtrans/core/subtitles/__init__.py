"""Subtitle document handling."""

from .parser import CueParser, parse_cues

__all__ = ["CueParser", "parse_cues"]
