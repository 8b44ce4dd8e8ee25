"""FantasyWire - NFL fantasy news ingestion and classification."""

__version__ = "0.1.0"
