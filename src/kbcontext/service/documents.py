"""Turn long text into knowledge bank entries.

Text over the chunk threshold becomes a parent entry (first chunk) plus one
child entry per remaining chunk; shorter text becomes a single entry. The
entries are only built in memory; saving them is the caller's business.
"""

from kbcontext.config.schema import ChunkingConfig
from kbcontext.core.chunking import chunk_document
from kbcontext.entities import EntryType, KnowledgeBankEntry


def build_document_entries(
    content: str,
    title: str,
    workspace_id: str,
    entry_type: EntryType = EntryType.DOCUMENT,
    original_file_name: str | None = None,
    mime_type: str | None = None,
    config: ChunkingConfig | None = None,
) -> list[KnowledgeBankEntry]:
    """Build the entries for one ingested document.

    Args:
        content: Full document text
        title: Document title
        workspace_id: Owning workspace
        entry_type: Type of a non-chunked entry; chunked documents are
            always of type document
        original_file_name: Source file name, if any
        mime_type: Source MIME type, if any
        config: Chunking configuration

    Returns:
        [entry] for short text, otherwise [parent, *children]
    """
    chunks = chunk_document(content, title, config)
    common = {
        "workspace_id": workspace_id,
        "original_file_name": original_file_name,
        "mime_type": mime_type,
    }

    if not chunks:
        return [KnowledgeBankEntry(type=entry_type, title=title, content=content, **common)]

    first, *rest = chunks
    parent = KnowledgeBankEntry(
        type=EntryType.DOCUMENT,
        title=first.title,
        content=first.content,
        chunk_index=first.index,
        **common,
    )
    children = [
        KnowledgeBankEntry(
            type=EntryType.DOCUMENT,
            title=chunk.title,
            content=chunk.content,
            parent_entry_id=parent.id,
            chunk_index=chunk.index,
            **common,
        )
        for chunk in rest
    ]
    return [parent, *children]
