"""TF-IDF scoring primitives.

Pure math over already-tokenized text; no domain logic. Used to boost
entries that match rare query terms more than entries that only match
terms every entry contains.
"""

import math
from collections import Counter
from collections.abc import Sequence


def compute_tf(tokens: Sequence[str], term: str) -> float:
    """Fraction of ``tokens`` equal to ``term`` (0 for an empty document)."""
    if not tokens:
        return 0.0
    return tokens.count(term) / len(tokens)


def compute_idf(total_docs: int, docs_with_term: int) -> float:
    """Inverse document frequency, ``log(N / df)``.

    Returns 0 for an empty corpus, for terms that appear nowhere, and for
    terms that appear in every document.
    """
    if total_docs <= 0 or docs_with_term <= 0:
        return 0.0
    return math.log(total_docs / docs_with_term)


def build_corpus_idf(corpus: Sequence[Sequence[str]]) -> dict[str, float]:
    """Build an IDF map for every term in a tokenized corpus."""
    document_frequency: Counter[str] = Counter()
    for tokens in corpus:
        document_frequency.update(set(tokens))

    total_docs = len(corpus)
    return {term: compute_idf(total_docs, df) for term, df in document_frequency.items()}


def tfidf_score(
    doc_tokens: Sequence[str],
    query_tokens: Sequence[str],
    idf: dict[str, float],
) -> float:
    """Sum of TF x IDF over the query terms present in the document."""
    if not doc_tokens or not query_tokens:
        return 0.0

    counts = Counter(doc_tokens)
    length = len(doc_tokens)
    score = 0.0
    for term in query_tokens:
        if term in counts:
            score += (counts[term] / length) * idf.get(term, 0.0)
    return score
