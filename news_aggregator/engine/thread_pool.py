"""Fixed-size worker pool feeding article documents into the store."""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Callable, Sequence

from ..errors import ArticleFileError
from ..logging_conf import get_logger
from .dedup import ArticleStore, IngestOutcome
from .parser import ArticleParser

FileCallback = Callable[[Path, bool], None]


@dataclass
class DispatchSummary:
    """Tally of one dispatcher run."""

    files_total: int = 0
    files_processed: int = 0
    failed_files: dict[Path, str] = field(default_factory=dict)
    records: int = 0
    records_skipped: int = 0
    outcomes: Counter = field(default_factory=Counter)

    @property
    def files_failed(self) -> int:
        return len(self.failed_files)


def partition(files: Sequence[Path], workers: int) -> list[list[Path]]:
    """Deal files round-robin into at most ``workers`` non-empty shards."""

    shards: list[list[Path]] = [[] for _ in range(max(1, workers))]
    for index, path in enumerate(files):
        shards[index % len(shards)].append(path)
    return [shard for shard in shards if shard]


class WorkDispatcher:
    """Run a fixed pool of workers over the article files of one run."""

    def __init__(
        self,
        store: ArticleStore,
        workers: int = 4,
        parser: ArticleParser | None = None,
        on_file_done: FileCallback | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError("WorkDispatcher needs at least one worker")
        self.store = store
        self.workers = workers
        self.parser = parser or ArticleParser()
        self.on_file_done = on_file_done
        self.logger = get_logger("dispatcher")
        self._summary_lock = Lock()

    def run_all(self, files: Sequence[Path]) -> DispatchSummary:
        """Ingest every file and return once all of them have been handled."""

        summary = DispatchSummary(files_total=len(files))
        shards = partition(files, self.workers)
        self.logger.info("dispatch_started", files=len(files), shards=len(shards))
        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="aggregator"
        ) as executor:
            futures = [
                executor.submit(self._run_shard, worker_id, shard, summary)
                for worker_id, shard in enumerate(shards)
            ]
            wait(futures)
            for future in futures:
                # Unexpected worker errors abort the whole run.
                future.result()
        self.logger.info(
            "dispatch_finished",
            files=summary.files_total,
            failed=summary.files_failed,
            records=summary.records,
            skipped=summary.records_skipped,
            duplicates=self.store.duplicates,
            unique=len(self.store),
        )
        return summary

    def _run_shard(self, worker_id: int, shard: list[Path], summary: DispatchSummary) -> None:
        log = self.logger.bind(worker=worker_id)
        for path in shard:
            try:
                document = self.parser.parse_file(path)
            except ArticleFileError as exc:
                log.error("article_file_failed", file=str(path), error=exc.reason)
                with self._summary_lock:
                    summary.failed_files[path] = exc.reason
                self._notify(path, ok=False)
                continue
            outcomes: Counter = Counter()
            for article in document.articles:
                outcomes[self.store.ingest(article)] += 1
            log.debug(
                "article_file_ingested",
                file=str(path),
                records=len(document.articles),
                skipped=len(document.skipped),
                accepted=outcomes[IngestOutcome.ACCEPTED],
            )
            with self._summary_lock:
                summary.files_processed += 1
                summary.records += len(document.articles)
                summary.records_skipped += len(document.skipped)
                summary.outcomes.update(outcomes)
            self._notify(path, ok=True)

    def _notify(self, path: Path, ok: bool) -> None:
        if self.on_file_done is not None:
            self.on_file_done(path, ok)


__all__ = ["DispatchSummary", "WorkDispatcher", "partition"]
