"""Database initialization and schema management."""

import logging
from typing import Any, Dict

from psycopg.errors import DatabaseError

from .connection import get_connection

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
-- Sources table (maintained by the admin surface)
CREATE TABLE IF NOT EXISTS sources (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    feed_url TEXT,
    homepage_url TEXT,
    scrape_selector TEXT,
    fetch_method TEXT NOT NULL DEFAULT 'feed' CHECK (fetch_method IN ('feed', 'scrape', 'adapter')),
    allowed BOOLEAN NOT NULL DEFAULT TRUE,
    priority INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Articles table
CREATE TABLE IF NOT EXISTS articles (
    id SERIAL PRIMARY KEY,
    source_id INTEGER NOT NULL REFERENCES sources(id),
    url TEXT NOT NULL,
    canonical_url TEXT NOT NULL,
    domain TEXT NOT NULL,
    title TEXT NOT NULL,
    cleaned_title TEXT NOT NULL,
    slug TEXT NOT NULL,
    fingerprint TEXT NOT NULL,
    summary TEXT,
    published_at TIMESTAMPTZ,
    discovered_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    topics TEXT[] NOT NULL DEFAULT '{}',
    primary_topic TEXT,
    secondary_topic TEXT,
    confidence REAL,
    week SMALLINT CHECK (week IS NULL OR (week >= 1 AND week <= 18)),
    image_url TEXT,
    is_player_page BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(canonical_url),
    UNIQUE(fingerprint)
);

-- Ingest diagnostics (append-only)
CREATE TABLE IF NOT EXISTS ingest_logs (
    id BIGSERIAL PRIMARY KEY,
    source_id INTEGER REFERENCES sources(id) ON DELETE SET NULL,
    url TEXT,
    title TEXT,
    domain TEXT,
    reason TEXT NOT NULL CHECK (reason IN (
        'fetch_error', 'parse_error', 'scrape_no_matches', 'invalid_item',
        'blocked_by_filter', 'non_nfl_league', 'filtered_out',
        'upsert_inserted', 'upsert_updated', 'upsert_skipped'
    )),
    detail TEXT,
    logged_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Operator blocklist
CREATE TABLE IF NOT EXISTS blocked_urls (
    id SERIAL PRIMARY KEY,
    url TEXT NOT NULL UNIQUE,
    reason TEXT,
    created_by TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_sources_allowed_priority ON sources(allowed, priority DESC, id);
CREATE INDEX IF NOT EXISTS idx_articles_source_id ON articles(source_id);
CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at);
CREATE INDEX IF NOT EXISTS idx_articles_primary_topic ON articles(primary_topic);
CREATE INDEX IF NOT EXISTS idx_articles_week ON articles(week);
CREATE INDEX IF NOT EXISTS idx_ingest_logs_source_id ON ingest_logs(source_id, logged_at DESC);
CREATE INDEX IF NOT EXISTS idx_ingest_logs_reason ON ingest_logs(reason, logged_at DESC);

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Create update triggers
DROP TRIGGER IF EXISTS update_sources_updated_at ON sources;
CREATE TRIGGER update_sources_updated_at BEFORE UPDATE ON sources
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

DROP TRIGGER IF EXISTS update_articles_updated_at ON articles;
CREATE TRIGGER update_articles_updated_at BEFORE UPDATE ON articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

DROP TRIGGER IF EXISTS update_blocked_urls_updated_at ON blocked_urls;
CREATE TRIGGER update_blocked_urls_updated_at BEFORE UPDATE ON blocked_urls
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Initialize database schema."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                # Execute schema SQL
                cur.execute(SCHEMA_SQL)
                conn.commit()
                logger.info("Database schema initialized successfully")
    except DatabaseError as e:
        logger.error("Failed to initialize database schema: %s", e)
        raise
