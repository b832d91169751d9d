"""Plain-text exporter writing one artifact file per report section."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ...logging_conf import get_logger
from ..report import Report
from .base import BaseExporter

ALL_ARTICLES_FILE = "all_articles.txt"
KEYWORDS_FILE = "keywords_count.txt"
REPORTS_FILE = "reports.txt"


class FileExporter(BaseExporter):
    """Write report artifacts as newline-terminated text files."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.written: list[Path] = []
        self.logger = get_logger("exporter")

    def export(self, report: Report) -> None:
        self._write(
            ALL_ARTICLES_FILE,
            (f"{article.uuid} {article.published}" for article in report.articles),
        )
        for category, uuids in report.categories.items():
            self._write(f"{category}.txt", uuids)
        for language, uuids in report.languages.items():
            self._write(f"{language}.txt", uuids)
        self._write(KEYWORDS_FILE, (str(entry) for entry in report.keywords))
        self._write(REPORTS_FILE, report.summary_lines())
        self.logger.info("report_written", output_dir=str(self.output_dir), files=len(self.written))

    def _write(self, filename: str, lines: Iterable[str]) -> Path:
        path = self.output_dir / filename
        with path.open("w", encoding="utf-8", newline="\n") as stream:
            for line in lines:
                stream.write(line)
                stream.write("\n")
        self.written.append(path)
        return path


__all__ = ["ALL_ARTICLES_FILE", "FileExporter", "KEYWORDS_FILE", "REPORTS_FILE"]
