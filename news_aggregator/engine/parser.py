"""JSON document parsing into Article records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ArticleFileError
from ..logging_conf import get_logger
from .models import Article


@dataclass
class ParsedDocument:
    """Records recovered from one document plus the indexes that were dropped."""

    articles: list[Article] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)


class ArticleParser:
    """Turn a JSON array document into Article records.

    Whole-document problems (unreadable file, invalid JSON, a non-array root)
    raise :class:`ArticleFileError`. A single bad record is logged and skipped
    so the rest of the document still counts.
    """

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def parse_file(self, path: Path) -> ParsedDocument:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ArticleFileError(path, f"cannot read file: {exc}") from exc
        return self.parse_document(raw, source=path)

    def parse_document(self, raw: str, source: Path | str = "<memory>") -> ParsedDocument:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ArticleFileError(source, f"invalid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise ArticleFileError(source, "document must be a JSON array")

        document = ParsedDocument()
        for index, node in enumerate(payload):
            article = self._parse_record(node, index, source)
            if article is None:
                document.skipped.append(index)
            else:
                document.articles.append(article)
        return document

    def _parse_record(self, node: Any, index: int, source: Path | str) -> Article | None:
        if not isinstance(node, dict):
            self.logger.warning(
                "article_record_skipped", file=str(source), index=index, error="not an object"
            )
            return None
        try:
            return Article.model_validate(node)
        except ValidationError as exc:
            self.logger.warning(
                "article_record_skipped",
                file=str(source),
                index=index,
                error=f"{exc.error_count()} validation error(s)",
                fields=sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]}),
            )
            return None


__all__ = ["ArticleParser", "ParsedDocument"]
