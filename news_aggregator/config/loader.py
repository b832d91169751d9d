"""Configuration loading helpers for the aggregator."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import RunConfig, Vocabulary

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
VOCABULARY_FILE_COUNT = 3


def _read_file(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Malformed configuration file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def read_counted_lines(path: Path) -> list[str]:
    """Read a file whose first line is a count followed by that many entries."""

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read list file {path}: {exc}") from exc
    if not text:
        raise ConfigError(f"List file is empty: {path}")
    # Only line feeds separate entries; other Unicode line breaks stay in the entry.
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    try:
        count = int(lines[0].strip())
    except ValueError as exc:
        raise ConfigError(f"List file {path} must start with an entry count") from exc
    if count < 0:
        raise ConfigError(f"List file {path} declares a negative count: {count}")
    entries = [line.strip() for line in lines[1 : count + 1]]
    if len(entries) < count:
        raise ConfigError(
            f"List file {path} declares {count} entries but only {len(entries)} are present"
        )
    return entries


class ConfigLoader:
    """Resolve the article file list and vocabulary for a run."""

    def load_run_config(self, path: Path) -> RunConfig:
        if path.suffix not in CONFIG_EXTENSIONS:
            raise ConfigError(f"Unsupported configuration format: {path.suffix or path.name}")
        payload = _read_file(path)
        try:
            config = RunConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid run configuration {path}:\n{exc}") from exc
        return config.resolved(path.resolve().parent)

    def load_article_paths(self, articles_file: Path) -> list[Path]:
        """Return article document paths resolved against the list file's folder."""

        base_dir = articles_file.resolve().parent
        return [(base_dir / entry).resolve() for entry in read_counted_lines(articles_file)]

    def load_vocabulary(self, auxiliary_file: Path) -> Vocabulary:
        base_dir = auxiliary_file.resolve().parent
        entries = read_counted_lines(auxiliary_file)
        if len(entries) < VOCABULARY_FILE_COUNT:
            raise ConfigError(
                f"Auxiliary file {auxiliary_file} must list {VOCABULARY_FILE_COUNT} vocabulary files"
            )
        languages_file, categories_file, stop_words_file = (
            (base_dir / entry).resolve() for entry in entries[:VOCABULARY_FILE_COUNT]
        )
        return Vocabulary(
            languages=frozenset(read_counted_lines(languages_file)),
            categories=frozenset(read_counted_lines(categories_file)),
            stop_words=frozenset(read_counted_lines(stop_words_file)),
        )


__all__ = ["CONFIG_EXTENSIONS", "ConfigLoader", "read_counted_lines"]
