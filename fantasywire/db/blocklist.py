"""Operator URL blocklist."""

from psycopg_pool import AsyncConnectionPool

from .connection import pooled_connection


class BlockList:
    """Skip predicate over ``blocked_urls``."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize blocklist."""
        self.pool = pool

    async def is_blocked(self, canonical_url: str) -> bool:
        """True when an operator has suppressed this canonical URL."""
        async with pooled_connection(self.pool) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT 1 AS blocked FROM blocked_urls WHERE url = %s LIMIT 1",
                    (canonical_url,),
                )
                row = await cur.fetchone()
        return row is not None
