"""SQLAlchemy models for PostgreSQL database.

This module defines the ORM models that map to database tables.
"""

import uuid
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from src.domain.entities.university import SearchQueryEntry, UniversityResult
from src.shared.utils.timezone import ensure_utc

Base: Any = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


class SearchQueryModel(Base):
    """ORM model for search_queries table.

    One row per case-insensitive degree. ``degree_normalized`` carries the
    uniqueness constraint; ``degree`` keeps the casing of the first writer.
    """

    __tablename__ = "search_queries"

    query_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    degree = Column(String(100), nullable=False)
    degree_normalized = Column(String(100), nullable=False, unique=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    results = relationship(
        "SearchResultModel",
        back_populates="search_query",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_domain_entity(
        self, results: list[UniversityResult] | None = None
    ) -> SearchQueryEntry:
        """Convert ORM model to domain entity."""
        return SearchQueryEntry(
            query_id=self.query_id,
            degree=self.degree,
            degree_normalized=self.degree_normalized,
            created_at=self.created_at,
            updated_at=self.updated_at,
            results=results or [],
        )


class SearchResultModel(Base):
    """ORM model for search_results table."""

    __tablename__ = "search_results"

    result_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    query_id = Column(
        Uuid(as_uuid=True),
        ForeignKey(
            "search_queries.query_id",
            name="fk_search_results_query_id",
            ondelete="CASCADE",
        ),
        nullable=False,
    )
    # Index within the written batch; tie-break for equal rankings
    position = Column(Integer, nullable=False, default=0)

    university_name = Column(String(255), nullable=False)
    country = Column(String(100), nullable=False)
    ranking = Column(Integer, nullable=False)
    psw_duration = Column(Text, nullable=False)
    psw_details = Column(Text, nullable=False)
    industry_match = Column(Text, nullable=False)
    major_employers = Column(JSONList, nullable=False, default=list)
    employability_rank = Column(Integer, nullable=True)
    graduate_employment_rate = Column(Text, nullable=True)
    avg_starting_salary = Column(Text, nullable=True)
    health_insurance = Column(Text, nullable=False)
    visa_fees = Column(Text, nullable=False)
    proof_of_funds = Column(Text, nullable=False)
    full_ride_available = Column(Boolean, nullable=False, default=False)
    full_ride_details = Column(Text, nullable=True)
    tuition_waiver_available = Column(Boolean, nullable=False, default=False)
    tuition_waiver_details = Column(Text, nullable=True)
    accreditation_bodies = Column(JSONList, nullable=False, default=list)
    accreditation_details = Column(Text, nullable=True)
    source_url = Column(Text, nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=False)
    cached_at = Column(DateTime(timezone=True), nullable=False)

    search_query = relationship("SearchQueryModel", back_populates="results")

    __table_args__ = (
        CheckConstraint("ranking >= 1", name="check_ranking_positive"),
        Index("idx_search_results_query_id", "query_id"),
        Index("idx_search_results_expires_at", "expires_at"),
    )

    def to_domain_entity(self) -> UniversityResult:
        """Convert ORM model to domain entity."""
        return UniversityResult(
            id=str(self.result_id),
            university_name=self.university_name,
            country=self.country,
            ranking=self.ranking,
            psw_duration=self.psw_duration,
            psw_details=self.psw_details,
            industry_match=self.industry_match,
            major_employers=list(self.major_employers or []),
            employability_rank=self.employability_rank,
            graduate_employment_rate=self.graduate_employment_rate,
            avg_starting_salary=self.avg_starting_salary,
            health_insurance=self.health_insurance,
            visa_fees=self.visa_fees,
            proof_of_funds=self.proof_of_funds,
            full_ride_available=self.full_ride_available,
            full_ride_details=self.full_ride_details,
            tuition_waiver_available=self.tuition_waiver_available,
            tuition_waiver_details=self.tuition_waiver_details,
            accreditation_bodies=list(self.accreditation_bodies or []),
            accreditation_details=self.accreditation_details,
            source_url=self.source_url,
            cached_at=ensure_utc(self.cached_at),
            expires_at=ensure_utc(self.expires_at),
        )

    @classmethod
    def from_domain_entity(
        cls,
        entity: UniversityResult,
        query_id: uuid.UUID,
        position: int,
        expires_at,
        cached_at,
    ) -> "SearchResultModel":
        """Create ORM model from domain entity.

        The provider's ``id`` is not kept; the store assigns its own.
        """
        return cls(
            query_id=query_id,
            position=position,
            university_name=entity.university_name,
            country=entity.country,
            ranking=entity.ranking,
            psw_duration=entity.psw_duration,
            psw_details=entity.psw_details,
            industry_match=entity.industry_match,
            major_employers=list(entity.major_employers),
            employability_rank=entity.employability_rank,
            graduate_employment_rate=entity.graduate_employment_rate,
            avg_starting_salary=entity.avg_starting_salary,
            health_insurance=entity.health_insurance,
            visa_fees=entity.visa_fees,
            proof_of_funds=entity.proof_of_funds,
            full_ride_available=entity.full_ride_available,
            full_ride_details=entity.full_ride_details,
            tuition_waiver_available=entity.tuition_waiver_available,
            tuition_waiver_details=entity.tuition_waiver_details,
            accreditation_bodies=list(entity.accreditation_bodies),
            accreditation_details=entity.accreditation_details,
            source_url=entity.source_url,
            expires_at=expires_at,
            cached_at=cached_at,
        )
