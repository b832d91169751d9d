"""Exception hierarchy shared across the aggregator."""

from __future__ import annotations

from pathlib import Path


class NewsAggregatorError(Exception):
    """Base class for every error raised by the aggregator."""


class ConfigError(NewsAggregatorError):
    """Configuration inputs are missing or malformed; the run cannot start."""


class ArticleFileError(NewsAggregatorError):
    """A single article document could not be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


__all__ = ["ArticleFileError", "ConfigError", "NewsAggregatorError"]
