"""Session scopes for the result store.

Every store operation opens its own short-lived session; nothing is held
open across a provider call.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = structlog.get_logger(__name__)


class SessionFactory:
    """Hands out write and read session scopes bound to one engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # Rows stay readable after commit; the session is gone by then
        self._make_session = async_sessionmaker(engine, expire_on_commit=False)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session whose work commits as one unit.

        Leaving the block normally commits. Any exception rolls the whole
        unit back and is re-raised to the repository.

        Example:
            async with session_factory.transaction() as session:
                await session.execute(delete(...))
                session.add_all(rows)
        """
        session = self._make_session()
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.debug("transaction_rolled_back", error_type=type(e).__name__)
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def read_only(self) -> AsyncGenerator[AsyncSession]:
        session = self._make_session()
        try:
            yield session
        finally:
            # Reads never persist anything
            await session.rollback()
            await session.close()
