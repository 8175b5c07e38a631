"""Database connection management.

This module provides async database connection management using SQLAlchemy 2.0
with connection pooling. PostgreSQL (asyncpg) is the production target; any
SQLAlchemy async URL works, which is how tests run against SQLite.
"""

import structlog
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.infrastructure.persistence.postgres.models import Base
from src.infrastructure.persistence.postgres.session_factory import SessionFactory
from src.shared.config.settings import DatabaseSettings, get_settings

logger = structlog.get_logger(__name__)


class DatabaseConnection:
    """Owns the async engine and the session factory built on it."""

    def __init__(
        self,
        database_url: str | None = None,
        db_settings: DatabaseSettings | None = None,
        echo: bool = False,
    ):
        """Initialize database connection manager.

        Args:
            database_url: Optional database URL, defaults to settings
            db_settings: Optional database settings, defaults to global settings
            echo: Log emitted SQL
        """
        self._db_settings = db_settings or get_settings().database
        self.database_url = database_url or self._db_settings.async_database_url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: SessionFactory | None = None

    async def initialize(self) -> None:
        """Initialize the database engine and session factory."""
        if self._engine is not None:
            return

        url = make_url(self.database_url)
        engine_kwargs: dict = {"echo": self._echo}
        if url.get_backend_name() == "postgresql":
            engine_kwargs.update(
                pool_size=self._db_settings.db_pool_size,
                max_overflow=self._db_settings.db_max_overflow,
                pool_timeout=self._db_settings.db_pool_timeout,
                pool_recycle=self._db_settings.db_pool_recycle,
                pool_pre_ping=True,  # Enable connection health checks
                connect_args={"server_settings": {"timezone": "UTC"}},
            )

        self._engine = create_async_engine(self.database_url, **engine_kwargs)
        self._session_factory = SessionFactory(self._engine)
        logger.info(
            "database_connection_initialized",
            url=url.render_as_string(hide_password=True),
        )

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        await self.initialize()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_schema_created")

    async def close(self) -> None:
        """Close the database engine."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("database_connection_closed")

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine instance.

        Raises:
            RuntimeError: If not initialized
        """
        if self._engine is None:
            raise RuntimeError("Database connection not initialized")
        return self._engine

    @property
    def session_factory(self) -> SessionFactory:
        """Get the session factory.

        Raises:
            RuntimeError: If not initialized
        """
        if self._session_factory is None:
            raise RuntimeError("Database connection not initialized")
        return self._session_factory
