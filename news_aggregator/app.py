"""Typer CLI entrypoint for the news aggregator."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLoader, RunConfig
from .engine import DispatchSummary, Report
from .errors import ConfigError
from .logging_conf import configure_logging, default_log_dir, tail_log
from .orchestrator import Orchestrator, PreparedRun
from .ui import FileProgress

app = typer.Typer(
    help="Aggregate news article files into deduplicated reports.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


def _build_config(
    workers: Optional[int],
    articles_file: Optional[Path],
    auxiliary_file: Optional[Path],
    output_dir: Optional[Path],
    config_file: Optional[Path],
) -> RunConfig:
    payload: dict[str, object] = {}
    if config_file is not None:
        payload = ConfigLoader().load_run_config(config_file).model_dump()
    overrides = {
        "workers": workers,
        "articles_file": articles_file,
        "auxiliary_file": auxiliary_file,
        "output_dir": output_dir,
    }
    payload.update({key: value for key, value in overrides.items() if value is not None})
    missing = [key for key in ("articles_file", "auxiliary_file") if key not in payload]
    if missing:
        raise ConfigError(
            "Missing " + ", ".join(missing) + "; pass them as arguments or via --config."
        )
    try:
        return RunConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid run configuration:\n{exc}") from exc


def _render_prepared_table(prepared: PreparedRun) -> Table:
    table = Table(title="Run inputs", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("item", style="cyan", no_wrap=True)
    table.add_column("value", style="green")
    table.add_row("article files", str(len(prepared.files)))
    table.add_row("languages", str(len(prepared.vocabulary.languages)))
    table.add_row("categories", str(len(prepared.vocabulary.categories)))
    table.add_row("linking words", str(len(prepared.vocabulary.stop_words)))
    return table


def _render_summary_table(report: Report, summary: DispatchSummary) -> Table:
    table = Table(title="Aggregation summary", box=box.SIMPLE_HEAD)
    table.add_column("metric", style="cyan", no_wrap=True)
    table.add_column("value", style="green", overflow="fold")
    table.add_row("files processed", f"{summary.files_processed}/{summary.files_total}")
    table.add_row("files failed", str(summary.files_failed))
    table.add_row("records read", str(summary.records))
    table.add_row("records skipped", str(summary.records_skipped))
    for line in report.summary_lines():
        metric, _, value = line.partition(" - ")
        table.add_row(metric, value)
    return table


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose=verbose)


@app.command("run", help="Ingest every article file and write the report artifacts.")
def run(
    workers: Optional[int] = typer.Argument(None, help="Number of worker threads."),
    articles_file: Optional[Path] = typer.Argument(None, help="File listing article documents."),
    auxiliary_file: Optional[Path] = typer.Argument(None, help="File listing vocabulary files."),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory receiving the artifacts (default: cwd)."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON run configuration."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar."),
    quiet: bool = typer.Option(False, "--quiet", help="Skip the summary table."),
) -> None:
    orchestrator = Orchestrator()
    try:
        config = _build_config(workers, articles_file, auxiliary_file, output_dir, config_file)
        prepared = orchestrator.prepare(config)
    except ConfigError as exc:
        console.print(f"Configuration error: {exc}", style="red")
        raise typer.Exit(code=1)

    reporter = FileProgress(enabled=progress, console=console)
    reporter.start(len(prepared.files))
    try:
        result = orchestrator.execute(prepared, on_file_done=reporter.advance)
    finally:
        reporter.close()

    if not quiet:
        console.print(_render_summary_table(result.report, result.summary))
    for path, reason in sorted(result.summary.failed_files.items()):
        console.print(f"skipped {path}: {reason}", style="yellow")
    console.print(f"Wrote {len(result.written)} files to {config.output_dir}", style="bold green")


@app.command("validate", help="Load the configuration inputs without ingesting anything.")
def validate(
    articles_file: Path = typer.Argument(..., help="File listing article documents."),
    auxiliary_file: Path = typer.Argument(..., help="File listing vocabulary files."),
) -> None:
    try:
        config = RunConfig(articles_file=articles_file, auxiliary_file=auxiliary_file)
        prepared = Orchestrator().prepare(config)
    except ConfigError as exc:
        console.print(f"Configuration error: {exc}", style="red")
        raise typer.Exit(code=1)
    console.print(_render_prepared_table(prepared))
    missing = [path for path in prepared.files if not path.is_file()]
    for path in missing:
        console.print(f"missing article file: {path}", style="yellow")
    console.print("Configuration OK", style="bold green")


@app.command("log", help="Show the tail of the aggregator log.")
def log(
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show error.log instead."),
) -> None:
    path = default_log_dir() / ("error.log" if errors else "aggregator.log")
    content = tail_log(path, lines)
    if not content:
        console.print(f"No log entries in {path}", style="yellow")
        raise typer.Exit(code=0)
    for line in content:
        console.print(line.rstrip("\n"), markup=False, highlight=False)


__all__ = ["app"]
