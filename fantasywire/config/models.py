"""Configuration models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("fantasywire", description="Database name")
    user: str = Field("fantasywire", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    min_size: int = Field(1, description="Minimum pooled connections", ge=1)
    max_size: int = Field(10, description="Maximum pooled connections", ge=1, le=100)


class FetchConfig(BaseModel):
    """Outbound HTTP behaviour shared by every fetch."""

    timeout_seconds: float = Field(12.0, description="Deadline per attempt", gt=0)
    max_retries: int = Field(2, description="Extra attempts on 5xx/429/network errors", ge=0, le=10)
    backoff_seconds: float = Field(0.4, description="Linear backoff unit (x attempt number)", ge=0)
    user_agent: str = Field(
        "FantasyWireBot/1.0 (+https://github.com/fantasywire/fantasywire)",
        description="Client identifier sent with every request",
    )


class IngestDefaults(BaseModel):
    """Default batch parameters."""

    max_items_per_source: int = Field(150, description="Item cap per feed", ge=1, le=1000)
    max_concurrent_sources: int = Field(4, description="Sources processed in parallel", ge=1, le=32)
    scrape_link_cap: int = Field(100, description="Max links taken from an HTML scrape", ge=1, le=1000)
    target_league: str = Field("NFL", description="League admitted by the content filter")

    @field_validator("target_league")
    @classmethod
    def upper_league(cls, v: str) -> str:
        """Leagues are compared upper-case."""
        return v.strip().upper()


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    ingest: IngestDefaults = Field(default_factory=IngestDefaults)
    classifier_rules_path: Optional[str] = Field(
        None, description="Override file for classifier patterns and thresholds"
    )
    filter_rules_path: Optional[str] = Field(
        None, description="Override file for admission filter rules"
    )
    title_cleaners: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Per-source extra title suffix patterns, keyed by source name",
    )
