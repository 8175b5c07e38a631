"""Application use cases for UniScout."""

from .clear_expired_results import ClearExpiredResultsUseCase
from .search_universities import SearchOutcome, SearchUniversitiesUseCase

__all__ = [
    "ClearExpiredResultsUseCase",
    "SearchOutcome",
    "SearchUniversitiesUseCase",
]
