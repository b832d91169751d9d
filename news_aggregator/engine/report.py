"""Deterministic report derivation over a settled store snapshot."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..text import normalize_category
from .dedup import StoreSnapshot
from .models import Article

EMPTY_MARK = "-"


@dataclass(frozen=True)
class Ranked:
    """A name with its occurrence count, ``-``/0 when nothing qualified."""

    name: str = EMPTY_MARK
    count: int = 0

    def __str__(self) -> str:
        return f"{self.name} {self.count}"


@dataclass
class Report:
    """Everything written out at the end of a run."""

    articles: list[Article] = field(default_factory=list)
    categories: dict[str, list[str]] = field(default_factory=dict)
    languages: dict[str, list[str]] = field(default_factory=dict)
    keywords: list[Ranked] = field(default_factory=list)
    duplicates: int = 0
    best_author: Ranked = field(default_factory=Ranked)
    top_language: Ranked = field(default_factory=Ranked)
    top_category: Ranked = field(default_factory=Ranked)

    @property
    def unique_articles(self) -> int:
        return len(self.articles)

    @property
    def most_recent(self) -> Article | None:
        return self.articles[0] if self.articles else None

    @property
    def top_keyword(self) -> Ranked:
        return self.keywords[0] if self.keywords else Ranked()

    def summary_lines(self) -> list[str]:
        recent = self.most_recent
        recent_text = (
            f"{recent.published} {recent.url}" if recent else f"{EMPTY_MARK} {EMPTY_MARK}"
        )
        return [
            f"duplicates_found - {self.duplicates}",
            f"unique_articles - {self.unique_articles}",
            f"best_author - {self.best_author}",
            f"top_language - {self.top_language}",
            f"top_category - {self.top_category}",
            f"most_recent_article - {recent_text}",
            f"top_keyword_en - {self.top_keyword}",
        ]


def top_entry(counts: Mapping[str, int]) -> Ranked:
    """Highest count wins; ties go to the lexicographically smallest name."""

    if not counts:
        return Ranked()
    name, count = min(counts.items(), key=lambda item: (-item[1], item[0]))
    return Ranked(name, count)


def rank_articles(articles: Iterable[Article]) -> list[Article]:
    by_uuid = sorted(articles, key=lambda article: article.uuid)
    return sorted(by_uuid, key=lambda article: article.published, reverse=True)


def rank_counts(counts: Mapping[str, int]) -> list[Ranked]:
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [Ranked(name, count) for name, count in ordered]


class ReportGenerator:
    """Build a :class:`Report` from the store once ingestion has finished."""

    def generate(self, snapshot: StoreSnapshot) -> Report:
        articles = rank_articles(snapshot.articles)
        return Report(
            articles=articles,
            categories=self._sorted_members(snapshot.categories),
            languages=self._sorted_members(snapshot.languages),
            keywords=rank_counts(snapshot.keyword_counts),
            duplicates=snapshot.duplicates,
            best_author=top_entry(snapshot.author_counts),
            top_language=top_entry(self._tally_languages(articles)),
            top_category=top_entry(self._tally_categories(articles, snapshot.category_names)),
        )

    @staticmethod
    def _sorted_members(index: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
        result = {}
        for key in sorted(index):
            members = sorted(index[key])
            if members:
                result[key] = members
        return result

    @staticmethod
    def _tally_languages(articles: Iterable[Article]) -> Counter:
        return Counter(article.language for article in articles if article.language)

    @staticmethod
    def _tally_categories(articles: Iterable[Article], accepted: Mapping[str, str]) -> Counter:
        tally: Counter = Counter()
        for article in articles:
            keys = {normalize_category(name) for name in article.categories}
            tally.update(key for key in keys if key in accepted)
        return tally


__all__ = ["Ranked", "Report", "ReportGenerator", "rank_articles", "rank_counts", "top_entry"]
