"""Source registry access."""

import logging
from typing import List, Optional

from psycopg_pool import AsyncConnectionPool

from ..models import Source
from .connection import pooled_connection

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Read admitted sources; the only write is the feed URL self-heal."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize source registry."""
        self.pool = pool

    async def list_admitted(self, source_id: Optional[int] = None) -> List[Source]:
        """Allowed sources, highest priority first, then registration order."""
        query = """
            SELECT id, name, feed_url, homepage_url, scrape_selector,
                   fetch_method, allowed, priority, created_at, updated_at
            FROM sources
            WHERE allowed = TRUE
        """
        params: tuple = ()
        if source_id is not None:
            query += " AND id = %s"
            params = (source_id,)
        query += " ORDER BY priority DESC, id ASC"

        async with pooled_connection(self.pool) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                rows = await cur.fetchall()
        return [Source.model_validate(row) for row in rows]

    async def update_feed_url(self, source_id: int, feed_url: str) -> None:
        """Persist a discovered feed URL onto the source."""
        async with pooled_connection(self.pool) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE sources
                    SET feed_url = %s
                    WHERE id = %s AND feed_url IS DISTINCT FROM %s
                    """,
                    (feed_url, source_id, feed_url),
                )
            await conn.commit()
        logger.info("Source %s feed URL updated to %s", source_id, feed_url)
