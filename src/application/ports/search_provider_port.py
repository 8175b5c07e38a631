"""Port interface for the external university search provider."""

from abc import ABC, abstractmethod

from src.domain.entities.university import UniversityResult


class SearchProviderPort(ABC):
    """Abstract port for AI search providers.

    Implementations own their retry policy; callers do not retry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and errors."""
        pass

    @abstractmethod
    async def search(self, degree: str) -> list[UniversityResult]:
        """Fetch a fresh ranked result set for a degree.

        Args:
            degree: Validated, trimmed degree name

        Returns:
            Up to about 30 ranked universities

        Raises:
            FetchError: If the provider is unavailable or fails
        """
        pass

    async def close(self) -> None:
        """Release provider resources."""
        return None
