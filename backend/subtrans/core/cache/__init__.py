"""Persistent translation cache."""

from .store import CacheStore

__all__ = ["CacheStore"]
