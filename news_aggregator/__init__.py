"""News Aggregator: concurrent article ingestion, deduplication and reporting."""

__version__ = "0.1.0"
