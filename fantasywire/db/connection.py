"""Database connection management."""

import os
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Dict, Generator

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from ..errors import StoreError, StoreUnavailableError


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "fantasywire")
        self.user = config.get("user", "fantasywire")
        self.min_size = config.get("min_size", 1)
        self.max_size = config.get("max_size", 10)

        # Handle password from environment variable if specified
        password_env = config.get("password_env")
        if password_env:
            self.password = os.environ.get(password_env, "") or config.get("password") or ""
        else:
            self.password = config.get("password") or ""

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password or None,
        )


def create_pool(config: Dict[str, Any]) -> AsyncConnectionPool:
    """Create an (unopened) async connection pool; the caller owns its lifetime."""
    db_config = DatabaseConfig(config)
    return AsyncConnectionPool(
        db_config.connection_string,
        min_size=db_config.min_size,
        max_size=db_config.max_size,
        kwargs={"row_factory": dict_row},
        open=False,
    )


@asynccontextmanager
async def pooled_connection(pool: AsyncConnectionPool) -> AsyncIterator[psycopg.AsyncConnection]:
    """Borrow a connection, mapping failures onto the store error hierarchy.

    Connection-level failures become ``StoreUnavailableError``; any other
    database error becomes ``StoreError``.
    """
    try:
        async with pool.connection() as conn:
            yield conn
    except (psycopg.OperationalError, PoolTimeout) as e:
        raise StoreUnavailableError(f"Datastore unavailable: {e}") from e
    except psycopg.Error as e:
        raise StoreError(f"Database error: {e}") from e


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Open a single synchronous connection (schema setup, health checks)."""
    db_config = DatabaseConfig(config)
    with psycopg.connect(db_config.connection_string, row_factory=dict_row) as conn:
        yield conn
