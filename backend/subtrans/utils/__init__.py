"""Utility modules for the subtitle translation backend."""

from .text import safe_truncate, preview_lines

__all__ = ["safe_truncate", "preview_lines"]
