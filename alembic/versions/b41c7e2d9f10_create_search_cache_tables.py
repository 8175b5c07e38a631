"""create_search_cache_tables

Revision ID: b41c7e2d9f10
Revises:
Create Date: 2026-10-19 10:12:41.204517

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b41c7e2d9f10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create search_queries and search_results for the degree result cache."""
    op.create_table(
        "search_queries",
        sa.Column(
            "query_id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("degree", sa.String(100), nullable=False),
        sa.Column("degree_normalized", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("query_id"),
        sa.UniqueConstraint(
            "degree_normalized", name="uq_search_queries_degree_normalized"
        ),
    )

    op.create_table(
        "search_results",
        sa.Column(
            "result_id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("query_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("university_name", sa.String(255), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("ranking", sa.Integer(), nullable=False),
        sa.Column("psw_duration", sa.Text(), nullable=False),
        sa.Column("psw_details", sa.Text(), nullable=False),
        sa.Column("industry_match", sa.Text(), nullable=False),
        sa.Column(
            "major_employers",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("employability_rank", sa.Integer(), nullable=True),
        sa.Column("graduate_employment_rate", sa.Text(), nullable=True),
        sa.Column("avg_starting_salary", sa.Text(), nullable=True),
        sa.Column("health_insurance", sa.Text(), nullable=False),
        sa.Column("visa_fees", sa.Text(), nullable=False),
        sa.Column("proof_of_funds", sa.Text(), nullable=False),
        sa.Column(
            "full_ride_available",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("full_ride_details", sa.Text(), nullable=True),
        sa.Column(
            "tuition_waiver_available",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("tuition_waiver_details", sa.Text(), nullable=True),
        sa.Column(
            "accreditation_bodies",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("accreditation_details", sa.Text(), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("cached_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("result_id"),
        sa.ForeignKeyConstraint(
            ["query_id"],
            ["search_queries.query_id"],
            name="fk_search_results_query_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("ranking >= 1", name="check_ranking_positive"),
    )

    op.create_index("idx_search_results_query_id", "search_results", ["query_id"])
    # Serves both the freshness filter and the expired sweep
    op.create_index("idx_search_results_expires_at", "search_results", ["expires_at"])


def downgrade() -> None:
    """Drop the result cache tables."""
    op.drop_index("idx_search_results_expires_at", table_name="search_results")
    op.drop_index("idx_search_results_query_id", table_name="search_results")
    op.drop_table("search_results")
    op.drop_table("search_queries")
