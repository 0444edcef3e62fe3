"""
Database client and pool management
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

import asyncpg

from database.query import (
    DatabaseError,
    ErrorKind,
    InvalidQueryError,
    Query,
    QueryBuilder,
    QueryResult,
    build_sql,
)

logger = logging.getLogger(__name__)


def normalize_row(record) -> Dict[str, Any]:
    """Convert a database record to a JSON-friendly dict"""
    row = dict(record)
    for key, value in row.items():
        if isinstance(value, UUID):
            row[key] = str(value)
        elif hasattr(value, 'isoformat'):
            row[key] = value.isoformat()
    return row


class DatabaseClient:
    """Client for the hosted Postgres database behind the service"""

    def __init__(
        self,
        url: str,
        key: str = "",
        min_pool_size: int = 1,
        max_pool_size: int = 10,
        command_timeout: Optional[float] = None,
        pool=None,
    ):
        self.url = url
        self.key = key
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.command_timeout = command_timeout
        self._pool = pool

    @classmethod
    def from_settings(cls, settings) -> "DatabaseClient":
        return cls(
            settings.database_url,
            settings.database_key,
            min_pool_size=settings.db_pool_min_size,
            max_pool_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self):
        """Initialize database connection pool"""
        if self._pool is not None:
            return
        pool = await asyncpg.create_pool(
            self.url,
            password=self.key or None,
            min_size=self.min_pool_size,
            max_size=self.max_pool_size,
            command_timeout=self.command_timeout,
            statement_cache_size=0  # Fix for pgbouncer compatibility
        )

        # Test connection
        try:
            async with pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            await pool.close()
            raise

        self._pool = pool
        logger.info("Database initialized successfully")

    async def close(self):
        """Close database connection pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
        logger.info("Database connections closed")

    async def ping(self) -> bool:
        """Check the database answers a trivial query"""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    async def execute(self, query: Query) -> QueryResult:
        """Run a built query; remote failures come back as error values"""
        try:
            sql, params = build_sql(query)
        except InvalidQueryError as e:
            return QueryResult(error=DatabaseError(ErrorKind.QUERY, str(e)))

        if self._pool is None:
            return QueryResult(error=DatabaseError(ErrorKind.CONNECTION, "Database pool not initialized"))

        logger.debug(f"Executing {query.action.upper()}: {sql}")
        logger.debug(f"Parameters: {params}")

        try:
            async with self._pool.acquire() as conn:
                records = await conn.fetch(sql, *params)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Unique constraint violation on {query.table}: {e}")
            return QueryResult(error=DatabaseError(ErrorKind.CONFLICT, str(e)))
        except asyncpg.DataError as e:
            logger.warning(f"Invalid input for {query.table}: {e}")
            return QueryResult(error=DatabaseError(ErrorKind.INVALID_INPUT, str(e)))
        except asyncpg.PostgresConnectionError as e:
            logger.error(f"Database connection error: {e}")
            return QueryResult(error=DatabaseError(ErrorKind.CONNECTION, str(e)))
        except asyncpg.PostgresError as e:
            logger.error(f"Database error during {query.action.upper()} on {query.table}: {e}")
            return QueryResult(error=DatabaseError(ErrorKind.QUERY, str(e)))
        except (asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Database unreachable: {e}")
            return QueryResult(error=DatabaseError(ErrorKind.CONNECTION, str(e) or type(e).__name__))

        data: List[Dict[str, Any]] = [normalize_row(record) for record in records]
        return QueryResult(data=data)
