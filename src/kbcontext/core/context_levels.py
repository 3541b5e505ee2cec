"""Builders for the four detail levels of document context.

Each builder receives already-ranked document groups and a character
budget, and returns the body of its section (without header). Blocks are
added whole, in order, until the next one does not fit; a builder whose
first block does not fit returns an empty string.
"""

from collections.abc import Iterable, Iterator, Sequence
from itertools import chain

from kbcontext.core.grouping import get_display_title
from kbcontext.entities import DocumentGroup, DocumentSummaryStatus, KnowledgeBankEntry

CATALOG_HEADER = "DOCUMENT CATALOG"
DOC_SUMMARIES_HEADER = "DOCUMENT SUMMARIES"
CHAPTER_SUMMARIES_HEADER = "CHAPTER SUMMARIES"
RAW_CONTENT_HEADER = "RAW CONTENT"

LINE_SEPARATOR = "\n"
BLOCK_SEPARATOR = "\n\n"


def pack_blocks(blocks: Iterable[str], budget: int, separator: str = BLOCK_SEPARATOR) -> str:
    """Join the longest prefix of ``blocks`` whose joined length fits ``budget``."""
    packed: list[str] = []
    used = 0
    for block in blocks:
        cost = len(block) + (len(separator) if packed else 0)
        if used + cost > budget:
            break
        packed.append(block)
        used += cost
    return separator.join(packed)


def format_entry_block(label: str, text: str) -> str:
    return f"[{label}]\n{text}"


def build_catalog(groups: Sequence[DocumentGroup], budget: int) -> str:
    """One line per document: display title and section count."""
    lines = (
        f"- {get_display_title(group.parent)} ({group.total_parts} sections)"
        for group in groups
    )
    return pack_blocks(lines, budget, LINE_SEPARATOR)


def _document_summaries(groups: Sequence[DocumentGroup]) -> Iterator[str]:
    for group in groups:
        parent = group.parent
        if parent.document_summary_status == DocumentSummaryStatus.PENDING:
            continue
        summary = parent.effective_summary
        if summary:
            yield format_entry_block(get_display_title(parent), summary)


def build_doc_summaries(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Document-level summary of each group that has a ready summary."""
    return pack_blocks(_document_summaries(groups), budget)


def _chapter_summaries(groups: Sequence[DocumentGroup]) -> Iterator[str]:
    for group in groups:
        for child in group.children:
            summary = child.effective_summary
            if summary:
                yield format_entry_block(child.title, summary)


def build_chapter_summaries(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Chunk summaries, top-ranked documents first."""
    return pack_blocks(_chapter_summaries(groups), budget)


def _raw_chunks(groups: Sequence[DocumentGroup]) -> Iterator[str]:
    for group in groups:
        for chunk in group.chunks:
            if chunk.content.strip():
                yield format_entry_block(chunk.title, chunk.content)


def build_raw_content(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Full chunk text, starting with the top-ranked document."""
    return pack_blocks(_raw_chunks(groups), budget)


def _knowledge_blocks(entries: Iterable[KnowledgeBankEntry]) -> Iterator[str]:
    for entry in entries:
        yield format_entry_block(f"Knowledge: {entry.title}", entry.context_text)


def _pinned_document_blocks(groups: Sequence[DocumentGroup]) -> Iterator[str]:
    for group in groups:
        for chunk in group.chunks:
            if chunk.content.strip():
                yield format_entry_block(f"Knowledge: {chunk.title}", chunk.content)


def build_flat_entries(
    entries: Sequence[KnowledgeBankEntry],
    budget: int,
    pinned_documents: Sequence[DocumentGroup] = (),
) -> str:
    """Standalone entries as "[Knowledge: title]" blocks, summary preferred.

    Pinned entries come first, then the full chunk text of each pinned
    document, then the unpinned entries in the order given.
    """
    pinned = [e for e in entries if e.pinned is True]
    unpinned = [e for e in entries if e.pinned is not True]
    blocks = chain(
        _knowledge_blocks(pinned),
        _pinned_document_blocks(pinned_documents),
        _knowledge_blocks(unpinned),
    )
    return pack_blocks(blocks, budget)
