"""Entities - Domain models for the knowledge bank context assembler.

This module contains pure domain entities without business logic:
- KnowledgeBankEntry: One unit of reference material (text, image, document)
- DocumentGroup: A parent document entry with its child chunks
- GroupedEntries: Partition of entries into standalone items and documents
- Chunk: A bounded slice of an over-long document
"""

from kbcontext.entities.chunk import Chunk
from kbcontext.entities.document_group import DocumentGroup, GroupedEntries
from kbcontext.entities.entry import DocumentSummaryStatus, EntryType, KnowledgeBankEntry

__all__ = [
    "Chunk",
    "DocumentGroup",
    "DocumentSummaryStatus",
    "EntryType",
    "GroupedEntries",
    "KnowledgeBankEntry",
]
