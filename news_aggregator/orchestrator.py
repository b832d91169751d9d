"""Run orchestrator wiring configuration, ingestion, reporting and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .config import ConfigLoader, RunConfig, Vocabulary
from .engine import ArticleStore, DispatchSummary, Report, ReportGenerator, WorkDispatcher
from .engine.exporter import BaseExporter, FileExporter
from .engine.thread_pool import FileCallback
from .logging_conf import get_logger


@dataclass(slots=True)
class PreparedRun:
    """Configuration inputs loaded before any worker starts."""

    config: RunConfig
    vocabulary: Vocabulary
    files: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class RunResult:
    report: Report
    summary: DispatchSummary
    written: list[Path] = field(default_factory=list)


class Orchestrator:
    """Central coordinator for a single aggregation run."""

    def __init__(
        self,
        loader: ConfigLoader | None = None,
        exporter_factory: Callable[[Path], BaseExporter] | None = None,
    ) -> None:
        self.loader = loader or ConfigLoader()
        self.exporter_factory = exporter_factory or FileExporter
        self.logger = get_logger("orchestrator")

    def prepare(self, config: RunConfig) -> PreparedRun:
        """Load vocabulary and file list; raises ``ConfigError`` on bad input."""

        vocabulary = self.loader.load_vocabulary(config.auxiliary_file)
        files = self.loader.load_article_paths(config.articles_file)
        self.logger.info(
            "run_prepared",
            files=len(files),
            languages=len(vocabulary.languages),
            categories=len(vocabulary.categories),
            stop_words=len(vocabulary.stop_words),
        )
        return PreparedRun(config=config, vocabulary=vocabulary, files=files)

    def run(self, config: RunConfig, on_file_done: FileCallback | None = None) -> RunResult:
        return self.execute(self.prepare(config), on_file_done=on_file_done)

    def execute(
        self, prepared: PreparedRun, on_file_done: FileCallback | None = None
    ) -> RunResult:
        """Ingest the prepared files, then derive and export the report."""

        config = prepared.config
        store = ArticleStore(prepared.vocabulary)
        dispatcher = WorkDispatcher(store, workers=config.workers, on_file_done=on_file_done)
        summary = dispatcher.run_all(prepared.files)

        report = ReportGenerator().generate(store.snapshot())
        exporter = self.exporter_factory(config.output_dir)
        try:
            exporter.export(report)
        finally:
            exporter.close()
        written = list(getattr(exporter, "written", []))
        self.logger.info(
            "run_finished",
            unique=report.unique_articles,
            duplicates=report.duplicates,
            failed_files=summary.files_failed,
        )
        return RunResult(report=report, summary=summary, written=written)


__all__ = ["Orchestrator", "PreparedRun", "RunResult"]
