"""SQLAlchemy implementation of ResultStorePort.

This module provides the concrete implementation of the result store using
PostgreSQL with async SQLAlchemy.
"""

from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.ports.result_store_port import ResultStorePort
from src.domain.entities.university import SearchQueryEntry, UniversityResult
from src.infrastructure.persistence.postgres.models import (
    SearchQueryModel,
    SearchResultModel,
)
from src.infrastructure.persistence.postgres.session_factory import SessionFactory

logger = structlog.get_logger(__name__)

# A lost race on the unique degree_normalized insert is retried once
_MAX_REPLACE_ATTEMPTS = 2


class PostgresResultStore(ResultStorePort):
    """PostgreSQL implementation of the result store."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory providing short-lived sessions
        """
        self._session_factory = session_factory

    async def find_entry(self, normalized_key: str) -> SearchQueryEntry | None:
        """Find the entry for a normalized key, with all of its results.

        Args:
            normalized_key: Trimmed, lower-cased degree

        Returns:
            SearchQueryEntry if found, None otherwise
        """
        async with self._session_factory.read_only() as session:
            entry_stmt = select(SearchQueryModel).where(
                SearchQueryModel.degree_normalized == normalized_key
            )
            db_entry = (await session.execute(entry_stmt)).scalar_one_or_none()
            if db_entry is None:
                return None

            results_stmt = (
                select(SearchResultModel)
                .where(SearchResultModel.query_id == db_entry.query_id)
                .order_by(SearchResultModel.ranking.asc(), SearchResultModel.position)
            )
            db_results = (await session.execute(results_stmt)).scalars().all()

            return db_entry.to_domain_entity(
                results=[row.to_domain_entity() for row in db_results]
            )

    async def replace_results(
        self,
        degree: str,
        normalized_key: str,
        results: list[UniversityResult],
        expires_at: datetime,
        cached_at: datetime,
    ) -> SearchQueryEntry:
        """Atomically replace every result owned by a key.

        Raises:
            SQLAlchemyError: If the transaction fails
        """
        for attempt in range(1, _MAX_REPLACE_ATTEMPTS + 1):
            try:
                async with self._session_factory.transaction() as session:
                    db_entry = await self._lock_or_create_entry(
                        session, degree, normalized_key, cached_at
                    )

                    deleted = await session.execute(
                        delete(SearchResultModel).where(
                            SearchResultModel.query_id == db_entry.query_id
                        )
                    )

                    rows = [
                        SearchResultModel.from_domain_entity(
                            result,
                            query_id=db_entry.query_id,
                            position=position,
                            expires_at=expires_at,
                            cached_at=cached_at,
                        )
                        for position, result in enumerate(results)
                    ]
                    session.add_all(rows)
                    await session.flush()

                    logger.info(
                        "search_results_replaced",
                        query_id=str(db_entry.query_id),
                        degree=db_entry.degree,
                        deleted=deleted.rowcount,
                        inserted=len(rows),
                        expires_at=expires_at.isoformat(),
                    )

                    return db_entry.to_domain_entity(
                        results=[row.to_domain_entity() for row in rows]
                    )
            except IntegrityError:
                # Another writer created the entry first; retry against it
                if attempt == _MAX_REPLACE_ATTEMPTS:
                    raise
                logger.warning(
                    "search_query_insert_conflict",
                    degree_normalized=normalized_key,
                    attempt=attempt,
                )

        raise RuntimeError("unreachable")  # pragma: no cover

    async def _lock_or_create_entry(
        self,
        session: AsyncSession,
        degree: str,
        normalized_key: str,
        now: datetime,
    ) -> SearchQueryModel:
        """Find the entry and lock it for this transaction, or create it.

        The row lock serializes concurrent writers for one key so their
        delete-and-insert steps cannot interleave.
        """
        stmt = (
            select(SearchQueryModel)
            .where(SearchQueryModel.degree_normalized == normalized_key)
            .with_for_update()
        )
        db_entry = (await session.execute(stmt)).scalar_one_or_none()

        if db_entry is not None:
            db_entry.updated_at = now
            return db_entry

        db_entry = SearchQueryModel(
            degree=degree,
            degree_normalized=normalized_key,
            created_at=now,
            updated_at=now,
        )
        session.add(db_entry)
        await session.flush()
        logger.info(
            "search_query_created",
            query_id=str(db_entry.query_id),
            degree=degree,
        )
        return db_entry

    async def delete_expired(self, now: datetime) -> int:
        """Delete every result with ``expires_at < now``."""
        async with self._session_factory.transaction() as session:
            result = await session.execute(
                delete(SearchResultModel).where(SearchResultModel.expires_at < now)
            )
            return result.rowcount or 0

    async def get_statistics(self, now: datetime) -> dict[str, Any]:
        """Get store statistics."""
        async with self._session_factory.read_only() as session:
            total_queries = (
                await session.execute(
                    select(func.count()).select_from(SearchQueryModel)
                )
            ).scalar() or 0

            total_results = (
                await session.execute(
                    select(func.count()).select_from(SearchResultModel)
                )
            ).scalar() or 0

            live_results = (
                await session.execute(
                    select(func.count())
                    .select_from(SearchResultModel)
                    .where(SearchResultModel.expires_at > now)
                )
            ).scalar() or 0

        return {
            "total_queries": total_queries,
            "total_results": total_results,
            "live_results": live_results,
        }
