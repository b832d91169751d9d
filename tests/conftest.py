"""Shared fixtures: vocabulary, article builders and on-disk datasets."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

import pytest

from news_aggregator.config import Vocabulary
from news_aggregator.engine import Article, ArticleStore

LANGUAGES = ("english", "french", "german")
CATEGORIES = ("Sport", "World News", "Economy, Finance", "Tech")
STOP_WORDS = ("the", "a", "and", "of")


def write_counted(path: Path, entries: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join([str(len(entries)), *entries]) + "\n", encoding="utf-8")
    return path


def write_dataset(
    root: Path,
    documents: Sequence[Sequence[dict[str, Any]] | str],
    *,
    order: Iterable[int] | None = None,
    languages: Sequence[str] = LANGUAGES,
    categories: Sequence[str] = CATEGORIES,
    stop_words: Sequence[str] = STOP_WORDS,
) -> tuple[Path, Path]:
    """Lay out a complete input tree and return (articles_file, auxiliary_file).

    Each document is either a list of article dicts (dumped as JSON) or a raw
    string written verbatim. ``order`` permutes the listing of the documents.
    """

    data_dir = root / "data"
    names = []
    for index, document in enumerate(documents):
        path = data_dir / f"articles_{index:02d}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(list(document)), encoding="utf-8")
        names.append(f"data/{path.name}")
    if order is not None:
        names = [names[index] for index in order]
    articles_file = write_counted(root / "articles.txt", names)

    vocab_dir = root / "aux"
    write_counted(vocab_dir / "languages.txt", languages)
    write_counted(vocab_dir / "categories.txt", categories)
    write_counted(vocab_dir / "linking_words.txt", stop_words)
    auxiliary_file = write_counted(
        root / "inputs.txt",
        ["aux/languages.txt", "aux/categories.txt", "aux/linking_words.txt"],
    )
    return articles_file, auxiliary_file


def article_payload(uuid: str, title: str | None = None, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "uuid": uuid,
        "title": title or f"Title {uuid}",
        "url": f"https://news.example/{uuid}",
        "published": "2024-05-01T10:00:00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary(
        languages=frozenset(LANGUAGES),
        categories=frozenset(CATEGORIES),
        stop_words=frozenset(STOP_WORDS),
    )


@pytest.fixture
def store(vocabulary: Vocabulary) -> ArticleStore:
    return ArticleStore(vocabulary)


@pytest.fixture
def make_article() -> Callable[..., Article]:
    def _builder(uuid: str, title: str | None = None, **overrides: Any) -> Article:
        return Article.model_validate(article_payload(uuid, title, **overrides))

    return _builder


@pytest.fixture
def dataset(tmp_path: Path) -> Callable[..., tuple[Path, Path]]:
    def _writer(documents, **kwargs) -> tuple[Path, Path]:
        return write_dataset(tmp_path, documents, **kwargs)

    return _writer


@pytest.fixture(autouse=True)
def _isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_AGGREGATOR_LOG_DIR", str(tmp_path / "logs"))
