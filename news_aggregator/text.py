"""Text helpers shared by the vocabulary and the ingestion engine."""

from __future__ import annotations

import re
from typing import AbstractSet

# ASCII whitespace only; NBSP and other Unicode spaces stay inside a word.
_WHITESPACE = re.compile(r"[ \t\n\x0b\f\r]+")
_NON_LETTER = re.compile(r"[^a-z]")


def normalize_category(name: str) -> str:
    """Drop commas and collapse whitespace runs into single underscores."""

    return _WHITESPACE.sub("_", name.replace(",", ""))


def clean_token(token: str) -> str:
    return _NON_LETTER.sub("", token.lower())


def extract_keywords(text: str, stop_words: AbstractSet[str]) -> frozenset[str]:
    """Return the distinct cleaned words of ``text`` that are not stop-words."""

    keywords: set[str] = set()
    for token in _WHITESPACE.split(text):
        word = clean_token(token)
        if word and word not in stop_words:
            keywords.add(word)
    return frozenset(keywords)


__all__ = ["clean_token", "extract_keywords", "normalize_category"]
