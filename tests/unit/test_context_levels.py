"""Unit tests for the individual detail-level builders."""

from kbcontext.core.context_levels import (
    build_catalog,
    build_chapter_summaries,
    build_doc_summaries,
    build_flat_entries,
    build_raw_content,
    pack_blocks,
)
from kbcontext.entities import DocumentSummaryStatus


class TestPackBlocks:
    """Whole blocks only, stopping at the first that does not fit."""

    def test_fits_all(self):
        """Test packing blocks that all fit."""
        assert pack_blocks(["aa", "bb"], 6) == "aa\n\nbb"

    def test_separator_is_charged(self):
        """Test that separators count against the budget."""
        assert pack_blocks(["aa", "bb"], 5) == "aa"

    def test_stops_instead_of_skipping(self):
        """Test that packing stops at the first block that does not fit."""
        assert pack_blocks(["aaaa", "bbbbbbbbbb", "c"], 8) == "aaaa"

    def test_nothing_fits(self):
        """Test that nothing is packed when the first block is too big."""
        assert pack_blocks(["too long"], 3) == ""


class TestBuildCatalog:
    def test_empty(self):
        """Test the catalog with no documents."""
        assert build_catalog([], 500) == ""

    def test_lists_titles_with_section_counts(self, group_factory):
        """Test catalog lines with display titles and section counts."""
        groups = [group_factory("Security Notes - Part 1", 5), group_factory("History", 3)]
        catalog = build_catalog(groups, 500)

        assert catalog == "- Security Notes (6 sections)\n- History (4 sections)"

    def test_respects_budget(self, group_factory):
        """Test that the catalog fits its budget."""
        groups = [group_factory(f"Very Long Document Title Number {i}", 10) for i in range(50)]
        catalog = build_catalog(groups, 200)
        assert 0 < len(catalog) <= 200


class TestBuildDocSummaries:
    def test_empty(self):
        """Test document summaries with no documents."""
        assert build_doc_summaries([], 500) == ""

    def test_includes_summary(self, group_factory):
        """Test that a document summary is included."""
        groups = [group_factory("Security", 2, "A comprehensive security overview")]
        assert "A comprehensive security overview" in build_doc_summaries(groups, 1000)

    def test_skips_groups_without_summary(self, group_factory):
        """Test that documents without a summary are skipped."""
        assert build_doc_summaries([group_factory("NoSummary", 2)], 500) == ""

    def test_skips_pending_summary(self, group_factory):
        """Test that pending summaries are skipped."""
        groups = [
            group_factory("Pending", 2, "stale text", document_summary_status=DocumentSummaryStatus.PENDING),
            group_factory("Ready", 2, "fresh text", document_summary_status=DocumentSummaryStatus.READY),
        ]
        result = build_doc_summaries(groups, 1000)
        assert "stale text" not in result
        assert "[Ready]\nfresh text" in result


class TestBuildChapterSummaries:
    def test_empty(self):
        """Test chapter summaries with no documents."""
        assert build_chapter_summaries([], 500) == ""

    def test_includes_chunk_summaries(self, group_factory):
        """Test that chunk summaries are included without the document summary."""
        result = build_chapter_summaries([group_factory("Security", 3, "doc summary")], 2000)
        assert "chunk 2 summary" in result
        assert "chunk 3 summary" in result
        assert "doc summary" not in result

    def test_top_group_first(self, group_factory):
        """Test that the top-ranked document comes first."""
        groups = [group_factory("First", 1), group_factory("Second", 1)]
        result = build_chapter_summaries(groups, 2000)
        assert result.index("[First - Part 2]") < result.index("[Second - Part 2]")

    def test_respects_budget(self, group_factory):
        """Test that chapter summaries fit their budget."""
        result = build_chapter_summaries([group_factory("Doc", 20, "summary")], 100)
        assert len(result) <= 100


class TestBuildRawContent:
    def test_empty(self):
        """Test raw content with no documents."""
        assert build_raw_content([], 500) == ""

    def test_includes_parent_and_chunks(self, group_factory):
        """Test that raw content covers the parent and its chunks."""
        result = build_raw_content([group_factory("Doc", 2, "summary")], 2000)
        assert result.startswith("[Doc]\nparent content")
        assert "chunk 2 content" in result
        assert "chunk 3 content" in result

    def test_respects_budget(self, group_factory):
        """Test that raw content fits its budget."""
        result = build_raw_content([group_factory("Doc", 20, "summary")], 100)
        assert len(result) <= 100


class TestBuildFlatEntries:
    """Standalone entries and pinned documents."""

    def test_summary_preferred(self, entry_factory):
        """Test that flat entries prefer summaries."""
        entries = [
            entry_factory(title="With Summary", content="long content", summary="short summary"),
            entry_factory(title="Plain", content="plain content"),
        ]
        result = build_flat_entries(entries, 1000)
        assert result == "[Knowledge: With Summary]\nshort summary\n\n[Knowledge: Plain]\nplain content"

    def test_pinned_documents_after_pinned_entries(self, entry_factory, group_factory):
        """Test that pinned documents sit between pinned and unpinned entries."""
        entries = [
            entry_factory(title="Plain", content="plain content"),
            entry_factory(title="Pinned", content="pinned content", pinned=True),
        ]
        document = group_factory("Guide", 1, "guide summary", pinned=True)
        result = build_flat_entries(entries, 1000, [document])

        assert result == (
            "[Knowledge: Pinned]\npinned content\n\n"
            "[Knowledge: Guide]\nparent content\n\n"
            "[Knowledge: Guide - Part 2]\nchunk 2 content\n\n"
            "[Knowledge: Plain]\nplain content"
        )
