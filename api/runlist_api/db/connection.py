"""Database connection utilities for the Run List API."""

import logging
from typing import Optional
import asyncpg
from asyncpg import Pool

from ..config import get_settings

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from settings (``DATABASE_URL`` in the environment)."""
    return get_settings().database_url


class DatabaseManager:
    """Manages the asyncpg connection pool."""

    def __init__(self):
        self.pool: Optional[Pool] = None

    async def initialize(self) -> None:
        """Initialize the database connection pool."""
        if self.pool is None:
            settings = get_settings()
            self.pool = await asyncpg.create_pool(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                command_timeout=settings.db_command_timeout
            )
            logger.debug("Created asyncpg pool")

    async def close(self) -> None:
        """Close the database connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None


# Global database manager instance
db_manager = DatabaseManager()


async def get_db_pool() -> Pool:
    """Get the database connection pool."""
    if not db_manager.pool:
        await db_manager.initialize()
    return db_manager.pool
