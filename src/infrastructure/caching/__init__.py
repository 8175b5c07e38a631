"""Caching infrastructure for UniScout."""

from .result_cache import CacheReadResult, CacheWriteResult, ResultCache

__all__ = ["CacheReadResult", "CacheWriteResult", "ResultCache"]
