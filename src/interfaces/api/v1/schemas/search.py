"""
Pydantic models for search API endpoints.

These models define the wire contract for the search API. Result fields are
serialized in camelCase, which is what the web client consumes.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities.university import UniversityResult


class SearchRequest(BaseModel):
    """
    Request model for a degree search.

    Only presence is checked here; the degree rules (length, characters)
    are enforced by the use case so the error names the failing rule.
    """

    degree: Any = Field(
        ...,
        description="Degree name, 2-100 characters",
        examples=["Computer Science", "MBA"],
    )


class UniversityResultSchema(BaseModel):
    """A ranked university as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    university_name: str
    country: str
    ranking: int
    psw_duration: str
    psw_details: str
    industry_match: str
    major_employers: list[str]
    employability_rank: int | None = None
    graduate_employment_rate: str | None = None
    avg_starting_salary: str | None = None
    health_insurance: str
    visa_fees: str
    proof_of_funds: str
    full_ride_available: bool
    full_ride_details: str | None = None
    tuition_waiver_available: bool
    tuition_waiver_details: str | None = None
    accreditation_bodies: list[str]
    accreditation_details: str | None = None
    source_url: str | None = None
    cached_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_domain(cls, result: UniversityResult) -> "UniversityResultSchema":
        return cls.model_validate(result.model_dump())


class SearchData(BaseModel):
    """Payload of a successful search."""

    degree: str
    results: list[UniversityResultSchema]
    cached: bool = Field(..., description="True when served from the cache")


class SearchResponse(BaseModel):
    """Response model for a degree search."""

    success: bool = True
    data: SearchData

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "data": {
                        "degree": "Computer Science",
                        "cached": False,
                        "results": [],
                    },
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
