"""Diagnostic ingest log writer."""

import logging
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from ..errors import FantasyWireError
from ..models import IngestLogEntry, IngestReason
from .connection import pooled_connection

logger = logging.getLogger(__name__)


class IngestLogWriter:
    """Append ``ingest_logs`` rows. Never raises; a failed write is only logged."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize log writer."""
        self.pool = pool

    async def write(self, entry: IngestLogEntry) -> bool:
        """Persist one entry; returns False when the write failed."""
        try:
            async with pooled_connection(self.pool) as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO ingest_logs (source_id, url, title, domain, reason, detail)
                        VALUES (%s, %s, %s, %s, %s, %s)
                        """,
                        (
                            entry.source_id,
                            entry.url,
                            entry.title,
                            entry.domain,
                            entry.reason.value,
                            entry.detail,
                        ),
                    )
                await conn.commit()
            return True
        except FantasyWireError as e:
            logger.warning("Ingest log write failed (%s): %s", entry.reason.value, e)
            return False

    async def log(
        self,
        reason: IngestReason,
        source_id: Optional[int] = None,
        url: Optional[str] = None,
        title: Optional[str] = None,
        domain: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> bool:
        """Build and persist an entry."""
        entry = IngestLogEntry(
            source_id=source_id,
            url=url,
            title=title,
            domain=domain,
            reason=reason,
            detail=detail,
        )
        return await self.write(entry)
