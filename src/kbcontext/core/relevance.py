"""Keyword relevance scoring for knowledge bank entries.

Why this exists:
- Ranks entries by lexical similarity to the user's prompt so the most
  relevant material is injected first when the budget is tight
- Weights well-labeled material (title, tags) above body text
- Adds a TF-IDF boost so rare query terms count more than common ones

Everything here is pure: no I/O, no state, deterministic output.
"""

import re
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from kbcontext.config.schema import ScoringConfig
from kbcontext.core.tfidf import build_corpus_idf, tfidf_score

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "it", "as", "be", "was", "are",
    "been", "has", "had", "do", "did", "not", "no", "can", "will", "just",
    "so", "than", "too", "very", "that", "this", "its", "if", "then",
    "into", "also", "about", "up", "out", "what", "which", "who", "how",
    "when", "where", "why", "all", "each", "every", "both", "few", "more",
    "most", "other", "some", "such", "only", "own", "same", "my", "your",
    "his", "her", "our", "they", "them", "their", "me", "him", "she", "he",
    "we", "you",
})

_NON_WORD = re.compile(r"[^a-z0-9\s]")

_DEFAULT_SCORING = ScoringConfig()


class Scorable(Protocol):
    """Shape of anything the scorer can rank."""

    @property
    def title(self) -> str: ...

    @property
    def content(self) -> str: ...

    @property
    def summary(self) -> str | None: ...

    @property
    def tags(self) -> list[str]: ...


T = TypeVar("T", bound=Scorable)


def tokenize_raw(text: str, min_length: int = _DEFAULT_SCORING.min_token_length) -> list[str]:
    """Tokenize text into lowercase keywords, keeping duplicates.

    Removes punctuation, stop words and words shorter than ``min_length``.
    """
    if not text:
        return []
    words = _NON_WORD.sub("", text.lower()).split()
    return [w for w in words if len(w) >= min_length and w not in STOP_WORDS]


def tokenize(text: str | None, min_length: int = _DEFAULT_SCORING.min_token_length) -> list[str]:
    """Tokenize text into de-duplicated keywords in first-seen order."""
    if not text:
        return []
    return list(dict.fromkeys(tokenize_raw(text, min_length)))


def field_score(text: str | None, keywords: Iterable[str], min_length: int = _DEFAULT_SCORING.min_token_length) -> int:
    """Number of keywords present in a single text field."""
    if not text:
        return 0
    present = set(tokenize_raw(text, min_length))
    return sum(1 for kw in keywords if kw in present)


def score_entry(
    entry: Scorable,
    keywords: Sequence[str],
    config: ScoringConfig | None = None,
) -> float:
    """Score a single entry against a list of keyword tokens.

    Title matches weigh the most, then tags, then content and summary.
    Each keyword counts once per field it appears in.
    """
    if not keywords:
        return 0.0

    config = config or _DEFAULT_SCORING
    n = config.min_token_length
    tags_text = " ".join(entry.tags) if entry.tags else None

    return (
        field_score(entry.title, keywords, n) * config.title_weight
        + field_score(tags_text, keywords, n) * config.tag_weight
        + field_score(entry.content, keywords, n) * config.content_weight
        + field_score(entry.summary, keywords, n) * config.summary_weight
    )


def _entry_text(entry: Scorable) -> str:
    parts = [entry.title, entry.content]
    if entry.summary:
        parts.append(entry.summary)
    if entry.tags:
        parts.append(" ".join(entry.tags))
    return " ".join(parts)


def stable_rank(items: Sequence[T], scores: Sequence[float]) -> list[T]:
    """Sort items by descending score; ties keep their original order."""
    order = sorted(range(len(items)), key=lambda i: (-scores[i], i))
    return [items[i] for i in order]


def rank_entries(
    entries: Sequence[T],
    query: str | None,
    config: ScoringConfig | None = None,
) -> list[T]:
    """Rank entries by relevance to a query.

    Returns a new list. Without a query, or when the query has no
    meaningful keywords, the original order is preserved.
    """
    config = config or _DEFAULT_SCORING
    keywords = tokenize(query, config.min_token_length)
    if not keywords:
        return list(entries)

    scores = [score_entry(entry, keywords, config) for entry in entries]

    if config.use_tfidf:
        corpus = [tokenize_raw(_entry_text(entry), config.min_token_length) for entry in entries]
        idf = build_corpus_idf(corpus)
        scores = [score + tfidf_score(corpus[i], keywords, idf) for i, score in enumerate(scores)]

    return stable_rank(entries, scores)
