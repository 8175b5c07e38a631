"""PostgreSQL persistence adapters."""

from .connection import DatabaseConnection
from .result_store_repository import PostgresResultStore
from .session_factory import SessionFactory

__all__ = ["DatabaseConnection", "PostgresResultStore", "SessionFactory"]
