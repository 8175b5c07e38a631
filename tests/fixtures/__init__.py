"""Test fixtures for UniScout unit, integration and E2E tests."""

from .university_data import (
    BASE_TIME,
    InMemoryResultStore,
    MutableClock,
    ScriptedSearchProvider,
    failing_provider,
    make_university,
)

__all__ = [
    "BASE_TIME",
    "InMemoryResultStore",
    "MutableClock",
    "ScriptedSearchProvider",
    "failing_provider",
    "make_university",
]
