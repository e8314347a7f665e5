"""
Database connection and pool management
"""

import json
import logging
import os
import ssl
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Sequence

import asyncpg
from fastapi import Request

from config import settings
from database.errors import DatabaseQueryError
from utils.error_handling import StructuredLogger

logger = logging.getLogger(__name__)


def exit_process():
    """Terminate immediately; the pool may be in an inconsistent state"""
    logging.shutdown()
    os._exit(1)


class PooledConnection(asyncpg.Connection):
    """asyncpg connection that remembers whether the client closed it"""

    closed_by_client = False

    async def close(self, *, timeout=None):
        self.closed_by_client = True
        await super().close(timeout=timeout)

    def terminate(self):
        self.closed_by_client = True
        super().terminate()


class TransactionConnection:
    """
    Connection handed out by Database.transaction().

    Failed statements are logged with their SQL and parameters and
    raised as DatabaseQueryError, which rolls the transaction back.
    """

    def __init__(self, database: "Database", conn: asyncpg.Connection):
        self._database = database
        self._conn = conn

    async def fetchval(self, query: str, *args) -> Any:
        try:
            return await self._conn.fetchval(query, *args)
        except Exception as e:
            self._database._log_failure(query, args, e)
            raise DatabaseQueryError() from e

    async def execute(self, query: str, *args) -> str:
        try:
            return await self._conn.execute(query, *args)
        except Exception as e:
            self._database._log_failure(query, args, e)
            raise DatabaseQueryError() from e

    async def executemany(self, query: str, args: Sequence[Sequence[Any]]):
        try:
            await self._conn.executemany(query, args)
        except Exception as e:
            self._database._log_failure(query, args, e)
            raise DatabaseQueryError() from e


class Database:
    """
    Process-scoped handle around an asyncpg connection pool.

    Created once in the application lifespan and handed to routes through
    the get_database dependency.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        min_size: int = 2,
        max_size: int = 10,
        connection_timeout: float = 2.0,
        idle_timeout: float = 30.0,
        command_timeout: float = 60,
        use_ssl: bool = True,
        ssl_reject_unauthorized: bool = False,
        on_fatal: Callable[[], None] = exit_process
    ):
        self.dsn = dsn
        self.connect_kwargs = {
            key: value for key, value in {
                "host": host,
                "port": port,
                "database": database,
                "user": user,
                "password": password,
            }.items() if value is not None
        }
        self.min_size = min_size
        self.max_size = max_size
        self.connection_timeout = connection_timeout
        self.idle_timeout = idle_timeout
        self.command_timeout = command_timeout
        self.use_ssl = use_ssl
        self.ssl_reject_unauthorized = ssl_reject_unauthorized
        self.on_fatal = on_fatal
        self._pool: Optional[asyncpg.Pool] = None
        self._closing = False

    @classmethod
    def from_settings(cls) -> "Database":
        """Build a Database from environment configuration"""
        if settings.DATABASE_URL:
            return cls(
                settings.DATABASE_URL,
                **cls._pool_settings()
            )
        return cls(
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            database=settings.DB_NAME,
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            **cls._pool_settings()
        )

    @staticmethod
    def _pool_settings() -> Dict[str, Any]:
        return {
            "min_size": settings.DB_POOL_MIN_SIZE,
            "max_size": settings.DB_POOL_MAX_SIZE,
            "connection_timeout": settings.DB_CONNECTION_TIMEOUT,
            "idle_timeout": settings.DB_IDLE_TIMEOUT,
            "command_timeout": settings.DB_COMMAND_TIMEOUT,
            "use_ssl": settings.DB_SSL,
            "ssl_reject_unauthorized": settings.DB_SSL_REJECT_UNAUTHORIZED,
        }

    def build_ssl_context(self):
        """SSL argument for asyncpg: False, or a context honoring reject_unauthorized"""
        if not self.use_ssl:
            return False
        context = ssl.create_default_context()
        if not self.ssl_reject_unauthorized:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not initialized")
        return self._pool

    async def connect(self):
        """Create the connection pool and verify connectivity"""
        self._closing = False
        self._pool = await asyncpg.create_pool(
            self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.connection_timeout,
            command_timeout=self.command_timeout,
            max_inactive_connection_lifetime=self.idle_timeout,
            ssl=self.build_ssl_context(),
            connection_class=PooledConnection,
            init=self._init_connection,
            **self.connect_kwargs
        )

        # Test connection
        async with self._pool.acquire(timeout=self.connection_timeout) as conn:
            await conn.fetchval("SELECT 1")

        logger.info(f"Database initialized successfully (max connections: {self.max_size})")

    async def close(self):
        """Close the connection pool"""
        self._closing = True
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
        logger.info("Database connections closed")

    async def _init_connection(self, conn: asyncpg.Connection):
        """Per-connection setup run by the pool"""
        await conn.set_type_codec(
            "json",
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog"
        )
        conn.add_termination_listener(self._on_connection_terminated)

    def _on_connection_terminated(self, conn: asyncpg.Connection):
        """Any termination the client did not ask for is fatal"""
        if self._closing or getattr(conn, "closed_by_client", False):
            return
        logger.critical("Unexpected termination of a pooled database connection - shutting down")
        self.on_fatal()

    def _log_failure(self, query: str, params: Sequence[Any], error: Exception):
        StructuredLogger.log_error(
            "database_query_error",
            f"Error executing query: {error}",
            exception=error,
            extra_context={
                "query": query,
                "params": list(params),
            }
        )

    async def execute_query(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a parameterized statement and return its rows

        Args:
            query: SQL with positional $n placeholders
            params: Values bound to the placeholders

        Returns:
            List of rows as dictionaries

        Raises:
            DatabaseQueryError: On any execution failure
        """
        try:
            async with self.pool.acquire(timeout=self.connection_timeout) as conn:
                rows = await conn.fetch(query, *params)
        except Exception as e:
            self._log_failure(query, params, e)
            raise DatabaseQueryError() from e

        return [dict(row) for row in rows]

    async def fetch_value(self, query: str, params: Sequence[Any] = ()) -> Any:
        """Execute a statement and return the first column of the first row"""
        try:
            async with self.pool.acquire(timeout=self.connection_timeout) as conn:
                return await conn.fetchval(query, *params)
        except Exception as e:
            self._log_failure(query, params, e)
            raise DatabaseQueryError() from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[TransactionConnection]:
        """
        Hold one connection inside an open transaction.

        Commits when the block exits normally. Any exception rolls the
        transaction back and surfaces as DatabaseQueryError.
        """
        try:
            async with self.pool.acquire(timeout=self.connection_timeout) as conn:
                async with conn.transaction():
                    yield TransactionConnection(self, conn)
        except DatabaseQueryError:
            raise
        except Exception as e:
            StructuredLogger.log_error(
                "database_transaction_error",
                f"Transaction rolled back: {e}",
                exception=e
            )
            raise DatabaseQueryError() from e


async def init_database() -> Database:
    """Initialize the process-wide database handle"""
    database = Database.from_settings()
    await database.connect()
    return database


async def close_database(database: Optional[Database]):
    """Close the database handle if one was created"""
    if database is not None:
        await database.close()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the database handle bound to the app"""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database has not been initialized")
    return database
