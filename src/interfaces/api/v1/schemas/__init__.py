"""API v1 schemas."""

from .search import (
    HealthResponse,
    SearchData,
    SearchRequest,
    SearchResponse,
    UniversityResultSchema,
)

__all__ = [
    "HealthResponse",
    "SearchData",
    "SearchRequest",
    "SearchResponse",
    "UniversityResultSchema",
]
