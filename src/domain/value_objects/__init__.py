"""Value objects for the UniScout domain layer."""

from .degree_query import DegreeQuery
from .query_key import QueryKey

__all__ = ["DegreeQuery", "QueryKey"]
