"""Terminal progress bar tracking article files as workers finish them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass
class ProgressState:
    total: int
    ok: int = 0
    failed: int = 0
    current_file: str = ""


class FileProgress:
    """Render a single progress row fed from worker threads.

    Falls back to silent bookkeeping when stdout is not a terminal.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self.console = console or Console()
        if self.enabled and not self.console.is_terminal:
            self.enabled = False
        self.state: ProgressState | None = None
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._lock = Lock()

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled:
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]ingest", justify="left"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            TextColumn("[green]✓{task.fields[ok]:>4}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>3}", justify="right"),
            TextColumn("[dim]{task.fields[current_file]}", justify="left"),
            console=self.console,
            transient=True,
            refresh_per_second=12,
            expand=True,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            # Another live display owns the console.
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "ingest", total=total, ok=0, failed=0, current_file=""
        )

    def advance(self, path: Path, ok: bool) -> None:
        if self.state is None:
            raise RuntimeError("FileProgress.start must be called before advance")
        with self._lock:
            if ok:
                self.state.ok += 1
            else:
                self.state.failed += 1
            self.state.current_file = path.name
            if self._progress is not None and self._task_id is not None:
                self._progress.update(
                    self._task_id,
                    advance=1,
                    ok=self.state.ok,
                    failed=self.state.failed,
                    current_file=self.state.current_file,
                )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None


__all__ = ["FileProgress", "ProgressState"]
