"""Concurrent article store applying the uuid/title deduplication rules.

Every article is identified twice, by ``uuid`` and by ``title``. The first
article to claim both keys becomes valid. Any later article colliding on
either key bars that key for the rest of the run and retracts the article that
held it, undoing every index contribution it had made. Barred keys never
become valid again.

Mutations of canonical state for a key happen only while holding that key's
stripe of a :class:`StripedLock`, so racing arrivals on the same uuid or
title are serialised while unrelated articles proceed in parallel. Derived
indexes are independent thread-safe containers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Iterable

from ..config.models import Vocabulary
from ..logging_conf import get_logger
from ..text import extract_keywords, normalize_category
from .models import Article
from .sync import AtomicCounter, ConcurrentCounter, ConcurrentSetIndex, StripedLock

KEYWORD_LANGUAGE = "english"


class IngestOutcome(str, Enum):
    """What happened to a single ingested record."""

    ACCEPTED = "accepted"
    REJECTED_INVALID = "rejected_invalid"
    UUID_CONFLICT = "uuid_conflict"
    TITLE_CONFLICT = "title_conflict"

    @property
    def duplicates_added(self) -> int:
        if self is IngestOutcome.ACCEPTED:
            return 0
        if self is IngestOutcome.REJECTED_INVALID:
            return 1
        return 2


@dataclass(frozen=True)
class StoreSnapshot:
    """Settled copy of the store taken after ingestion finished."""

    articles: tuple[Article, ...]
    categories: dict[str, frozenset[str]]
    languages: dict[str, frozenset[str]]
    keyword_counts: dict[str, int]
    author_counts: dict[str, int]
    duplicates: int
    category_names: dict[str, str] = field(default_factory=dict)


class ArticleStore:
    """Shared ingestion state fed concurrently by dispatcher workers."""

    def __init__(self, vocabulary: Vocabulary, stripes: int = 64) -> None:
        self.vocabulary = vocabulary
        self._locks = StripedLock(stripes)
        self._by_uuid: dict[str, Article] = {}
        self._by_title: dict[str, Article] = {}
        self._invalid_uuids: set[str] = set()
        self._invalid_titles: set[str] = set()
        # Keyed by uuid; touched only under that uuid's stripe.
        self._valid: dict[str, Article] = {}
        self._article_keywords: dict[str, frozenset[str]] = {}
        self._category_index = ConcurrentSetIndex()
        self._language_index = ConcurrentSetIndex()
        self._keyword_counts = ConcurrentCounter()
        self._author_counts = ConcurrentCounter()
        self._duplicates = AtomicCounter()
        self.logger = get_logger("store")

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def ingest(self, article: Article) -> IngestOutcome:
        """Apply the deduplication rules to ``article`` atomically per key."""

        while True:
            uuid_owner = self._by_uuid.get(article.uuid)
            title_owner = self._by_title.get(article.title)
            keys: list[Hashable] = [("uuid", article.uuid), ("title", article.title)]
            if uuid_owner is not None:
                keys.append(("title", uuid_owner.title))
            if title_owner is not None:
                keys.append(("uuid", title_owner.uuid))
            with self._locks.hold(keys):
                # The owners decide which extra stripes are needed; retry if
                # either changed between the peek and the acquisition.
                if (
                    self._by_uuid.get(article.uuid) is uuid_owner
                    and self._by_title.get(article.title) is title_owner
                ):
                    outcome = self._ingest_locked(article)
                    break
        self._duplicates.add(outcome.duplicates_added)
        return outcome

    def _ingest_locked(self, article: Article) -> IngestOutcome:
        if article.uuid in self._invalid_uuids or article.title in self._invalid_titles:
            return IngestOutcome.REJECTED_INVALID

        previous = self._by_uuid.get(article.uuid)
        if previous is not None:
            self._invalid_uuids.add(article.uuid)
            self._retract(previous)
            self.logger.debug(
                "ingest_conflict", key="uuid", uuid=article.uuid, retracted=previous.uuid
            )
            return IngestOutcome.UUID_CONFLICT
        self._by_uuid[article.uuid] = article

        previous = self._by_title.get(article.title)
        if previous is not None:
            self._invalid_titles.add(article.title)
            self._invalid_uuids.add(article.uuid)
            self._retract(previous)
            del self._by_uuid[article.uuid]
            self.logger.debug(
                "ingest_conflict", key="title", uuid=article.uuid, retracted=previous.uuid
            )
            return IngestOutcome.TITLE_CONFLICT
        self._by_title[article.title] = article

        self._admit(article)
        return IngestOutcome.ACCEPTED

    def _admit(self, article: Article) -> None:
        self._valid[article.uuid] = article
        if article.author:
            self._author_counts.increment(article.author)
        for key in self.accepted_categories(article.categories):
            self._category_index.add(key, article.uuid)
        if self.vocabulary.is_language(article.language):
            self._language_index.add(article.language, article.uuid)
        if article.language == KEYWORD_LANGUAGE and article.text:
            keywords = extract_keywords(article.text, self.vocabulary.stop_words)
            if keywords:
                self._article_keywords[article.uuid] = keywords
                for word in keywords:
                    self._keyword_counts.increment(word)

    def _retract(self, article: Article) -> None:
        """Bar ``article`` and remove every index contribution it made.

        Must be called while holding the stripes of its uuid and title.
        """

        self._invalid_uuids.add(article.uuid)
        self._invalid_titles.add(article.title)
        if self._by_uuid.get(article.uuid) is article:
            del self._by_uuid[article.uuid]
        if self._by_title.get(article.title) is article:
            del self._by_title[article.title]
        if self._valid.get(article.uuid) is not article:
            return
        del self._valid[article.uuid]
        for key in self.accepted_categories(article.categories):
            self._category_index.discard(key, article.uuid)
        if article.language:
            self._language_index.discard(article.language, article.uuid)
        for word in self._article_keywords.pop(article.uuid, ()):
            self._keyword_counts.decrement(word)
        if article.author:
            self._author_counts.decrement(article.author)

    def accepted_categories(self, categories: Iterable[str]) -> set[str]:
        """Normalized accepted category keys, each listed once."""

        accepted = set()
        for name in categories:
            key = normalize_category(name)
            if self.vocabulary.accepts_category(key):
                accepted.add(key)
        return accepted

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def duplicates(self) -> int:
        return self._duplicates.value

    def __len__(self) -> int:
        return len(self._valid)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._valid

    def is_barred(self, uuid: str | None = None, title: str | None = None) -> bool:
        return (uuid is not None and uuid in self._invalid_uuids) or (
            title is not None and title in self._invalid_titles
        )

    def snapshot(self) -> StoreSnapshot:
        """Copy the settled state; call only once all ingestion has finished."""

        return StoreSnapshot(
            articles=tuple(self._valid.values()),
            categories=self._category_index.snapshot(),
            languages=self._language_index.snapshot(),
            keyword_counts=self._keyword_counts.snapshot(),
            author_counts=self._author_counts.snapshot(),
            duplicates=self._duplicates.value,
            category_names=dict(self.vocabulary.category_names),
        )

    def verify(self) -> list[str]:
        """Return invariant violations observed at a quiescent point."""

        problems: list[str] = []
        valid_ids = {id(article) for article in self._valid.values()}
        if {id(a) for a in self._by_uuid.values()} != valid_ids:
            problems.append("uuid map does not match the valid set")
        if {id(a) for a in self._by_title.values()} != valid_ids:
            problems.append("title map does not match the valid set")
        barred = self._invalid_uuids.intersection(self._by_uuid)
        if barred:
            problems.append(f"barred uuids still mapped: {sorted(barred)}")
        barred = self._invalid_titles.intersection(self._by_title)
        if barred:
            problems.append(f"barred titles still mapped: {sorted(barred)}")
        snapshot = self.snapshot()
        for name, index in (("category", snapshot.categories), ("language", snapshot.languages)):
            for key, members in index.items():
                stale = members.difference(self._valid)
                if stale:
                    problems.append(f"{name} {key} references retracted articles: {sorted(stale)}")
        stale = set(self._article_keywords).difference(self._valid)
        if stale:
            problems.append(f"keyword sets kept for retracted articles: {sorted(stale)}")
        return problems


__all__ = ["ArticleStore", "IngestOutcome", "KEYWORD_LANGUAGE", "StoreSnapshot"]
