"""Document-level relevance scoring.

A document whose title matches the query should usually outrank one where
a single buried chunk matches, but a document with one highly relevant
chunk must still surface under a generic title. The score therefore blends:

    title * 3 + document summary * 2 + best chunk * 1 + mean(top 3 chunks) * 0.5

Weights come from DocumentScoringConfig.
"""

from collections.abc import Sequence

from kbcontext.config.schema import DocumentScoringConfig, ScoringConfig
from kbcontext.core.relevance import field_score, score_entry, stable_rank, tokenize
from kbcontext.entities import DocumentGroup

_DEFAULT_WEIGHTS = DocumentScoringConfig()


def score_document_group(
    group: DocumentGroup,
    keywords: Sequence[str],
    weights: DocumentScoringConfig | None = None,
    scoring: ScoringConfig | None = None,
) -> float:
    """Score a whole document group against keyword tokens."""
    if not keywords:
        return 0.0

    weights = weights or _DEFAULT_WEIGHTS
    scoring = scoring or ScoringConfig()
    parent = group.parent

    title_score = field_score(parent.title, keywords, scoring.min_token_length)
    summary_score = field_score(parent.effective_summary, keywords, scoring.min_token_length)

    chunk_scores = sorted(
        (score_entry(chunk, keywords, scoring) for chunk in group.chunks),
        reverse=True,
    )
    top = chunk_scores[: weights.top_chunk_count]
    best_chunk = top[0] if top else 0.0
    top_average = sum(top) / len(top) if top else 0.0

    return (
        title_score * weights.title_weight
        + summary_score * weights.summary_weight
        + best_chunk * weights.max_chunk_weight
        + top_average * weights.top_chunks_weight
    )


def rank_document_groups(
    groups: Sequence[DocumentGroup],
    query: str | None = None,
    weights: DocumentScoringConfig | None = None,
    scoring: ScoringConfig | None = None,
) -> list[DocumentGroup]:
    """Rank document groups by relevance; original order without a query."""
    scoring = scoring or ScoringConfig()
    keywords = tokenize(query, scoring.min_token_length)
    if not keywords:
        return list(groups)

    scores = [score_document_group(group, keywords, weights, scoring) for group in groups]
    return stable_rank(groups, scores)
