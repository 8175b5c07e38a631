"""Search provider adapters."""

from .response_parser import UniversityResponseParser
from .tavily_adapter import TavilyConfig, TavilySearchAdapter

__all__ = ["TavilyConfig", "TavilySearchAdapter", "UniversityResponseParser"]
