"""Article record shared by the parser, the engine and the reports."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

OPTIONAL_TEXT_FIELDS = frozenset({"author", "text", "language"})


class Article(BaseModel):
    """Immutable news article as found in an input document.

    Optional text fields default to an empty string; an empty ``author``,
    ``language`` or ``text`` is treated as absent by the engine.
    """

    model_config = ConfigDict(frozen=True)

    uuid: str
    title: str
    url: str
    published: str
    author: str = ""
    text: str = ""
    language: str = ""
    categories: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("uuid", "title", "url", "published", "author", "text", "language", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name in OPTIONAL_TEXT_FIELDS:
            return ""
        if isinstance(value, (bool, int, float)):
            return str(value).lower() if isinstance(value, bool) else str(value)
        return value

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        return ()


__all__ = ["Article"]
