"""Application layer ports for UniScout."""

from .result_store_port import ResultStorePort
from .search_provider_port import SearchProviderPort

__all__ = ["ResultStorePort", "SearchProviderPort"]
