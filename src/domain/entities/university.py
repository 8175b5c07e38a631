"""University result entities.

A ``UniversityResult`` is one ranked university for a degree search. A
``SearchQueryEntry`` owns the batch of results cached for one degree.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UniversityResult(BaseModel):
    """A ranked university with visa, cost, employability and scholarship data.

    Results are immutable once written; a new fetch replaces the whole batch.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(None, description="Stable identifier")
    university_name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=100)
    ranking: int = Field(..., ge=1, description="1-based rank, lower is better")

    # Post-study work visa
    psw_duration: str = Field(..., description="Post-study work visa duration")
    psw_details: str = Field(..., description="Post-study work visa requirements")

    # Industry and employability
    industry_match: str
    major_employers: list[str] = Field(default_factory=list)
    employability_rank: int | None = None
    graduate_employment_rate: str | None = None
    avg_starting_salary: str | None = None

    # Hidden costs
    health_insurance: str
    visa_fees: str
    proof_of_funds: str

    # Scholarships
    full_ride_available: bool = False
    full_ride_details: str | None = None
    tuition_waiver_available: bool = False
    tuition_waiver_details: str | None = None

    # Accreditation
    accreditation_bodies: list[str] = Field(default_factory=list)
    accreditation_details: str | None = None

    source_url: str | None = None

    # Cache bookkeeping, set by the store on write
    cached_at: datetime | None = None
    expires_at: datetime | None = None


class SearchQueryEntry(BaseModel):
    """The cache entry for one normalized degree key."""

    query_id: UUID
    degree: str = Field(..., description="Degree as first written, casing preserved")
    degree_normalized: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    results: list[UniversityResult] = Field(default_factory=list)
