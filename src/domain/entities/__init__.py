"""Domain entities for UniScout."""

from .university import SearchQueryEntry, UniversityResult

__all__ = ["SearchQueryEntry", "UniversityResult"]
