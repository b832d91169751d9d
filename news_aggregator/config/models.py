"""Pydantic models describing a single aggregation run."""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..text import normalize_category


class RunConfig(BaseModel):
    """Inputs needed to launch the ingestion pipeline."""

    workers: int = Field(default=4, ge=1)
    articles_file: Path
    auxiliary_file: Path
    output_dir: Path = Field(default=Path("."))

    @field_validator("articles_file", "auxiliary_file", "output_dir", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)

    def resolved(self, base_dir: Path) -> "RunConfig":
        """Return a copy whose relative paths are anchored at ``base_dir``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else (base_dir / path).resolve()

        return self.model_copy(
            update={
                "articles_file": _anchor(self.articles_file),
                "auxiliary_file": _anchor(self.auxiliary_file),
                "output_dir": _anchor(self.output_dir),
            }
        )


class Vocabulary(BaseModel):
    """Read-only word lists loaded once before ingestion starts."""

    model_config = ConfigDict(frozen=True)

    languages: frozenset[str] = Field(default_factory=frozenset)
    categories: frozenset[str] = Field(default_factory=frozenset)
    stop_words: frozenset[str] = Field(default_factory=frozenset)

    @cached_property
    def category_names(self) -> dict[str, str]:
        """Map normalized category keys back to their accepted spelling."""
        return {normalize_category(name): name for name in sorted(self.categories)}

    def is_language(self, language: str | None) -> bool:
        return bool(language) and language in self.languages

    def accepts_category(self, normalized: str) -> bool:
        return normalized in self.category_names


__all__ = ["RunConfig", "Vocabulary"]
