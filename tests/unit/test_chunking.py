"""Unit tests for boundary-aware document chunking."""

import re

import pytest

from kbcontext.config.schema import ChunkingConfig
from kbcontext.core.chunking import chunk_document, find_split_point
from kbcontext.entities import EntryType
from kbcontext.service.documents import build_document_entries

THRESHOLD = ChunkingConfig().threshold


class TestBelowThreshold:
    """Documents that fit in one entry are not chunked."""

    def test_short_text(self):
        """Test that short text is not chunked."""
        assert chunk_document("Short text", "Doc Title") == []

    def test_exactly_at_threshold(self):
        """Test text exactly at the threshold is not chunked."""
        assert chunk_document("x" * THRESHOLD, "Doc") == []

    def test_empty_content(self):
        """Test that empty text returns no chunks."""
        assert chunk_document("", "Empty") == []


class TestAboveThreshold:
    """Documents over the threshold are split."""

    def test_splits_into_multiple_chunks(self):
        """Test that text over the threshold is split."""
        chunks = chunk_document("a" * (THRESHOLD + 1000), "Big Doc")
        assert len(chunks) == 2
        assert len(chunks[0].content) == THRESHOLD
        assert len(chunks[1].content) == 1000

    def test_chunks_within_threshold(self):
        """Test that no chunk exceeds the threshold."""
        content = "word " * 3000
        for chunk in chunk_document(content, "Doc"):
            assert len(chunk.content) <= THRESHOLD

    def test_sequential_titles_and_indices(self):
        """Test that chunk titles and indices are sequential."""
        chunks = chunk_document("paragraph\n\n" * 2000, "My PDF")
        assert chunks[0].title == "My PDF - Part 1"
        assert chunks[1].title == "My PDF - Part 2"
        assert [c.index for c in chunks] == list(range(len(chunks)))

    def test_custom_part_label(self):
        """Test chunk titles with a custom part label."""
        config = ChunkingConfig(threshold=100, part_label="Section")
        chunks = chunk_document("x" * 250, "Doc", config)
        assert [c.title for c in chunks] == ["Doc - Section 1", "Doc - Section 2", "Doc - Section 3"]

    def test_slices_tile_the_content(self):
        """Test that chunk character ranges cover the whole text."""
        content = "Hello World. " * 1000
        chunks = chunk_document(content, "Doc")

        assert chunks[0].start_char == 0
        assert chunks[-1].end_char == len(content)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.end_char == nxt.start_char
        for chunk in chunks:
            assert content[chunk.start_char:chunk.end_char].strip() == chunk.content

    def test_preserves_all_content(self):
        """Test that chunks preserve the original text."""
        content = "Hello World. " * 1000
        reassembled = " ".join(c.content for c in chunk_document(content, "Doc"))
        assert re.sub(r"\s+", " ", reassembled).strip() == re.sub(r"\s+", " ", content).strip()


class TestBoundarySplitting:
    """Split point preference: paragraph, sentence, hard cut."""

    def test_prefers_paragraph_boundaries(self):
        """Test splitting at paragraph breaks."""
        content = "\n\n".join(["A" * 4000, "B" * 4000, "C" * 4000])
        chunks = chunk_document(content, "Doc")

        assert [c.content for c in chunks] == ["A" * 4000, "B" * 4000, "C" * 4000]

    def test_falls_back_to_sentence_boundaries(self):
        """Test splitting at sentence ends when there are no paragraphs."""
        content = "This is a test sentence. " * 500
        chunks = chunk_document(content, "Doc")

        assert len(chunks) > 1
        for chunk in chunks[:-1]:
            assert chunk.content.endswith(".")

    def test_early_paragraph_break_ignored(self):
        """A break before 30% of the window is not used."""
        window = "A" * 10 + "\n\n" + "B" * 88
        assert find_split_point(window, 30) == len(window)

    def test_sentence_used_when_paragraph_too_early(self):
        """Test that a sentence end is used when the paragraph break is too early."""
        window = "A" * 10 + "\n\n" + "B" * 50 + ". " + "C" * 36
        assert find_split_point(window, 30) == 63

    def test_hard_cut_without_boundaries(self):
        """Test a hard cut when there are no boundaries."""
        chunks = chunk_document("x" * (THRESHOLD * 3), "Doc")
        assert len(chunks) == 3
        assert all(len(c.content) == THRESHOLD for c in chunks)


class TestBuildDocumentEntries:
    """Chunked text becomes a parent entry with children."""

    def test_short_text_single_entry(self):
        """Test that short text becomes a single entry."""
        entries = build_document_entries("Brief note", "Note", "ws-1", entry_type=EntryType.TEXT)

        assert len(entries) == 1
        assert entries[0].type == EntryType.TEXT
        assert entries[0].parent_entry_id is None

    def test_long_text_parent_and_children(self):
        """Test that long text becomes a parent with child chunks."""
        entries = build_document_entries("x" * (THRESHOLD * 3), "Manual", "ws-1", original_file_name="manual.txt")
        parent, *children = entries

        assert parent.title == "Manual - Part 1"
        assert parent.parent_entry_id is None
        assert len(children) == 2
        assert all(c.parent_entry_id == parent.id for c in children)
        assert [c.chunk_index for c in children] == [1, 2]
        assert all(e.type == EntryType.DOCUMENT for e in entries)
        assert all(e.original_file_name == "manual.txt" for e in entries)

    @pytest.mark.parametrize("threshold", [50, 120])
    def test_respects_config(self, threshold):
        """Test entry sizes with a custom threshold."""
        config = ChunkingConfig(threshold=threshold)
        entries = build_document_entries("y" * 300, "Doc", "ws-1", config=config)
        assert all(len(e.content) <= threshold for e in entries)
