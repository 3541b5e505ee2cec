"""Unit tests for TF-IDF primitives."""

import pytest

from kbcontext.core.tfidf import build_corpus_idf, compute_idf, compute_tf, tfidf_score


class TestComputeTF:
    def test_ratio(self):
        """Test term frequency as a ratio."""
        assert compute_tf(["machine", "learning", "machine", "deep"], "machine") == pytest.approx(0.5)

    def test_absent_term(self):
        """Test the frequency of an absent term."""
        assert compute_tf(["hello", "world"], "missing") == 0

    def test_empty_tokens(self):
        """Test term frequency of an empty document."""
        assert compute_tf([], "anything") == 0


class TestComputeIDF:
    def test_rarer_terms_score_higher(self):
        """Test that rarer terms get a higher IDF."""
        assert compute_idf(10, 1) > compute_idf(10, 5)

    def test_term_in_all_documents(self):
        """Test that a term in every document has zero IDF."""
        assert compute_idf(10, 10) == 0

    def test_empty_corpus(self):
        """Test IDF for an empty corpus."""
        assert compute_idf(0, 0) == 0


class TestBuildCorpusIDF:
    def test_rare_term_has_higher_idf(self):
        """Test that a rare term gets a higher IDF than a common one."""
        idf = build_corpus_idf([
            ["machine", "learning", "deep"],
            ["machine", "vision", "neural"],
            ["cooking", "recipe", "pasta"],
        ])
        assert idf["cooking"] > idf["machine"]

    def test_shared_term_is_zero(self):
        """Test that a term shared by every document has zero IDF."""
        idf = build_corpus_idf([["common", "alpha"], ["common", "beta"]])
        assert idf["common"] == 0

    def test_empty_corpus(self):
        """Test building IDF from an empty corpus."""
        assert build_corpus_idf([]) == {}


class TestTfidfScore:
    def test_rare_match_beats_common_match(self):
        """Test that matching a rare term scores higher."""
        idf = build_corpus_idf([
            ["machine", "learning", "quantum"],
            ["machine", "learning", "neural"],
            ["machine", "learning", "deep"],
        ])
        doc = ["machine", "learning", "quantum"]
        assert tfidf_score(doc, ["quantum"], idf) > tfidf_score(doc, ["machine"], idf)

    def test_no_match(self):
        """Test the score when no query term matches."""
        assert tfidf_score(["alpha", "beta"], ["gamma"], {"alpha": 1.0}) == 0

    def test_accumulates_terms(self):
        """Test that scores add up across query terms."""
        idf = {"alpha": 1.0, "beta": 0.5}
        single = tfidf_score(["alpha", "beta"], ["alpha"], idf)
        double = tfidf_score(["alpha", "beta"], ["alpha", "beta"], idf)
        assert double > single
