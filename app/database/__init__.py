import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import asyncpg

from app.core.settings import settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


class DatabaseClientError(Exception):
    """Raised when a pooled connection cannot be obtained or returned."""


class PostgreSQLConnection:

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        min_size: int = 1,
        max_size: int = 10,
    ):
        self.pool: Optional[asyncpg.Pool] = None
        self.database = database
        self.config = {
            "host": host,
            "port": port,
            "user": user,
            "password": password,
            "database": database,
            "min_size": min_size,
            "max_size": max_size,
        }
        logger.debug(
            f"PostgreSQL connection config initialized for database: {self.database}"
        )

    async def connect(self) -> None:
        if self.pool is not None:
            logger.debug(
                f"PostgreSQL connection pool already exists for: {self.database}"
            )
            return

        try:
            logger.info(f"Connecting to PostgreSQL database: {self.database}")
            self.pool = await asyncpg.create_pool(**self.config)
            logger.info(
                f"PostgreSQL connection pool created successfully: {self.database}"
            )
        except Exception as e:
            logger.error(
                f"Failed to create PostgreSQL connection pool for {self.database}: {str(e)}"
            )
            self.pool = None
            raise DatabaseClientError(
                f"failed to connect to database {self.database}"
            ) from e

    async def close(self) -> None:
        if self.pool is None:
            logger.debug(f"No active connection pool to close for: {self.database}")
            return

        try:
            logger.info(f"Closing PostgreSQL connection pool: {self.database}")
            await self.pool.close()
            logger.info(
                f"PostgreSQL connection pool closed successfully: {self.database}"
            )
        except Exception as e:
            logger.error(
                f"Error closing PostgreSQL connection pool for {self.database}: {str(e)}"
            )
        finally:
            self.pool = None

    async def acquire(self) -> asyncpg.Connection:
        if self.pool is None:
            logger.error(f"Connection pool not initialized for {self.database}")
            raise DatabaseClientError(
                "Database connection pool is not initialized. Call connect() first."
            )
        try:
            return await self.pool.acquire()
        except Exception as e:
            logger.error(f"Failed to acquire connection for {self.database}: {e}")
            raise DatabaseClientError("failed to acquire database connection") from e

    async def release(self, conn: asyncpg.Connection) -> None:
        if self.pool is None:
            raise DatabaseClientError("connection pool closed before release")
        try:
            await self.pool.release(conn)
        except Exception as e:
            raise DatabaseClientError("failed to release database connection") from e

    @asynccontextmanager
    async def session(self) -> AsyncIterator[asyncpg.Connection]:
        """Hold one pooled connection for the duration of the block.

        The connection is released on every exit path. If the block raised,
        a release failure is only logged and the original exception wins.
        If the block succeeded, a release failure is raised as
        ``DatabaseClientError``.
        """
        conn = await self.acquire()
        try:
            yield conn
        except BaseException:
            try:
                await self.release(conn)
            except DatabaseClientError as release_error:
                logger.error(
                    "Failed to release database connection for %s: %s",
                    self.database,
                    release_error,
                )
            raise
        else:
            try:
                await self.release(conn)
            except DatabaseClientError:
                logger.error(
                    "Failed to release database connection for %s", self.database
                )
                raise

    async def apply_schema(self) -> None:
        ddl = SCHEMA_PATH.read_text(encoding="utf-8")
        async with self.session() as conn:
            await conn.execute(ddl)
        logger.info(f"Database schema applied for: {self.database}")

    async def is_connected(self) -> bool:
        if self.pool is None:
            logger.debug(f"Connection pool is None for database: {self.database}")
            return False

        if self.pool.is_closing():
            logger.debug(f"Connection pool is closing for database: {self.database}")
            return False

        return True


db_connection = PostgreSQLConnection(
    host=settings.database_host,
    port=settings.database_port,
    user=settings.database_user,
    password=settings.database_password,
    database=settings.database_name,
    min_size=settings.database_pool_min_size,
    max_size=settings.database_pool_max_size,
)
