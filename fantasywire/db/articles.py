"""Article storage and deduplication."""

import logging
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from ..normalize import NormalizedCandidate
from .connection import pooled_connection

logger = logging.getLogger(__name__)

INSERTED = "inserted"
SKIPPED = "skipped"


class ArticleStore:
    """Idempotent article insert keyed on canonical URL and fingerprint."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize article store."""
        self.pool = pool

    async def upsert(self, candidate: NormalizedCandidate, source_id: Optional[int]) -> str:
        """
        Insert a candidate unless an article with the same canonical URL or
        fingerprint already exists.

        Returns:
            ``"inserted"`` or ``"skipped"``; a conflict is not an error.

        Raises:
            StoreUnavailableError: the datastore could not be reached.
            StoreError: the row was rejected for any other reason.
        """
        article = candidate.to_article(source_id)
        async with pooled_connection(self.pool) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO articles (
                        source_id, url, canonical_url, domain, title, cleaned_title,
                        slug, fingerprint, summary, published_at, discovered_at,
                        topics, primary_topic, secondary_topic, confidence, week,
                        is_player_page
                    )
                    VALUES (
                        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, CURRENT_TIMESTAMP,
                        %s, %s, %s, %s, %s, %s
                    )
                    ON CONFLICT DO NOTHING
                    RETURNING id
                    """,
                    (
                        article.source_id,
                        article.url,
                        article.canonical_url,
                        article.domain,
                        article.title,
                        article.cleaned_title,
                        article.slug,
                        article.fingerprint,
                        article.summary,
                        article.published_at,
                        article.topics,
                        article.primary_topic,
                        article.secondary_topic,
                        article.confidence,
                        article.week,
                        article.is_player_page,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            logger.debug("Duplicate skipped: %s", candidate.canonical_url)
            return SKIPPED
        return INSERTED
