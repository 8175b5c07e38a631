"""Query key value object."""

from pydantic import BaseModel, ConfigDict, Field


class QueryKey(BaseModel):
    """Identifies one cache entry.

    Two keys are equal when their trimmed, lower-cased forms are equal.
    Internal whitespace is left untouched.
    """

    model_config = ConfigDict(frozen=True)

    display: str = Field(..., description="Trimmed input, original casing")
    normalized: str = Field(..., description="Trimmed, lower-cased lookup key")

    @classmethod
    def from_raw(cls, raw: str) -> "QueryKey":
        """Build a key from user input."""
        display = raw.strip()
        return cls(display=display, normalized=display.lower())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryKey):
            return NotImplemented
        return self.normalized == other.normalized

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        return self.display
