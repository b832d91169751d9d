from __future__ import annotations

import json
from pathlib import Path

import pytest

from news_aggregator.engine import ArticleParser
from news_aggregator.errors import ArticleFileError


def test_parse_document_with_optional_fields() -> None:
    raw = json.dumps(
        [
            {
                "uuid": "u1",
                "title": "Hello",
                "url": "https://news.example/u1",
                "published": "2024-01-01T00:00:00",
                "author": "Alice",
                "text": "Body",
                "language": "english",
                "categories": ["Sport", "Sport"],
            },
            {
                "uuid": "u2",
                "title": "Bare",
                "url": "https://news.example/u2",
                "published": "2024-01-02T00:00:00",
            },
        ]
    )
    first, second = ArticleParser().parse_document(raw).articles

    assert first.author == "Alice"
    assert first.categories == ("Sport", "Sport")
    assert second.author == ""
    assert second.text == ""
    assert second.language == ""
    assert second.categories == ()


def test_null_optional_fields_become_empty() -> None:
    raw = json.dumps(
        [
            {
                "uuid": 17,
                "title": "T",
                "url": "u",
                "published": "p",
                "author": None,
                "language": None,
                "categories": None,
            }
        ]
    )
    (article,) = ArticleParser().parse_document(raw).articles
    assert article.uuid == "17"
    assert article.author == ""
    assert article.language == ""
    assert article.categories == ()


def test_articles_are_immutable() -> None:
    raw = json.dumps([{"uuid": "u", "title": "t", "url": "l", "published": "p"}])
    (article,) = ArticleParser().parse_document(raw).articles
    with pytest.raises(Exception):
        article.title = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("[", "invalid JSON"),
        ('{"uuid": "u"}', "JSON array"),
    ],
)
def test_broken_documents_raise(raw: str, message: str) -> None:
    with pytest.raises(ArticleFileError, match=message):
        ArticleParser().parse_document(raw, source="doc.json")


def test_unreadable_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ArticleFileError) as excinfo:
        ArticleParser().parse_file(tmp_path / "absent.json")
    assert excinfo.value.path == tmp_path / "absent.json"


def test_bad_records_are_skipped_and_the_rest_kept() -> None:
    raw = json.dumps(
        [
            {"uuid": "u5", "title": "five", "url": "l5", "published": "p"},
            {"uuid": "u6"},
            "not a record",
            {"uuid": "u7", "title": "seven", "url": "l7", "published": "p"},
        ]
    )
    document = ArticleParser().parse_document(raw, source="doc.json")

    assert [article.uuid for article in document.articles] == ["u5", "u7"]
    assert document.skipped == [1, 2]


def test_document_of_only_bad_records_is_empty_not_an_error() -> None:
    document = ArticleParser().parse_document("[1, 2]")
    assert document.articles == []
    assert document.skipped == [0, 1]
