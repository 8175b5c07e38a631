"""Degree query value object with input validation.

This is the validator in front of the search flow: anything that reaches
the cache or the provider has passed through ``DegreeQuery.parse``.
"""

from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from src.domain.value_objects.query_key import QueryKey
from src.shared.exceptions import QueryValidationError

DEGREE_MIN_LENGTH = 2
DEGREE_MAX_LENGTH = 100
DEGREE_PATTERN = r"^[a-zA-Z0-9\s\-().,]+$"

# pydantic error type -> (constraint name, message)
_CONSTRAINT_MESSAGES: dict[str, tuple[str, str]] = {
    "string_too_short": (
        "min_length",
        f"Degree name must be at least {DEGREE_MIN_LENGTH} characters",
    ),
    "string_too_long": (
        "max_length",
        f"Degree name must be less than {DEGREE_MAX_LENGTH} characters",
    ),
    "string_pattern_mismatch": (
        "pattern",
        "Degree name contains invalid characters",
    ),
    "string_type": ("type", "Degree name must be a string"),
    "missing": ("required", "Degree name is required"),
}


class DegreeQuery(BaseModel):
    """A validated degree search request."""

    degree: str = Field(
        ...,
        min_length=DEGREE_MIN_LENGTH,
        max_length=DEGREE_MAX_LENGTH,
        pattern=DEGREE_PATTERN,
    )

    model_config = {"str_strip_whitespace": True}

    @property
    def key(self) -> QueryKey:
        """Cache key for this query."""
        return QueryKey.from_raw(self.degree)

    @classmethod
    def parse(cls, raw: Any) -> "DegreeQuery":
        """Validate raw user input.

        Args:
            raw: The submitted degree value

        Returns:
            A validated DegreeQuery

        Raises:
            QueryValidationError: Naming the first failing constraint
        """
        try:
            return cls(degree=raw)
        except PydanticValidationError as e:
            error = e.errors()[0]
            constraint, message = _CONSTRAINT_MESSAGES.get(
                error["type"], ("invalid", error.get("msg", "Invalid degree name"))
            )
            raise QueryValidationError(message=message, constraint=constraint) from e
