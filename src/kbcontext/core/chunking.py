"""Boundary-aware document chunking.

Why this exists:
- Long documents are stored as a parent entry plus child chunks so the
  context builder can pick the relevant parts instead of all or nothing
- Splits prefer paragraph breaks, then sentence ends, then a hard cut
- Chunks tile the source text: no overlap, nothing dropped
"""

from kbcontext.config.schema import ChunkingConfig
from kbcontext.entities import Chunk
from kbcontext.observability.logging import get_logger

logger = get_logger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_END = ". "


def find_split_point(window: str, min_position: float) -> int:
    """Return the length of the prefix of ``window`` to cut off.

    Uses the last paragraph break, else the last sentence end, when it lies
    past ``min_position``; otherwise the whole window (hard cut).
    """
    paragraph = window.rfind(PARAGRAPH_BREAK)
    if paragraph > min_position:
        return paragraph + len(PARAGRAPH_BREAK)

    sentence = window.rfind(SENTENCE_END)
    if sentence > min_position:
        # keep the period with this chunk, the space starts the next one
        return sentence + 1

    return len(window)


def chunk_document(
    content: str,
    title: str,
    config: ChunkingConfig | None = None,
) -> list[Chunk]:
    """Split an over-long document into bounded chunks.

    Args:
        content: Raw document text
        title: Document title used to label chunks
        config: Chunking configuration (threshold, boundary rule, part label)

    Returns:
        Chunks titled "{title} - Part {n}", or an empty list when the
        document fits in a single entry
    """
    config = config or ChunkingConfig()
    threshold = config.threshold

    if len(content) <= threshold:
        return []

    min_position = threshold * config.boundary_min_ratio
    chunks: list[Chunk] = []
    start = 0
    text_length = len(content)

    while start < text_length:
        remaining = text_length - start
        if remaining <= threshold:
            end = text_length
        else:
            end = start + find_split_point(content[start:start + threshold], min_position)

        piece = content[start:end].strip()
        if piece:
            chunks.append(
                Chunk(
                    index=len(chunks),
                    title=f"{title} - {config.part_label} {len(chunks) + 1}",
                    content=piece,
                    start_char=start,
                    end_char=end,
                )
            )
        start = end

    logger.debug(
        "document_chunked",
        title=title,
        content_length=text_length,
        chunk_count=len(chunks),
        avg_chunk_size=sum(len(c.content) for c in chunks) // len(chunks) if chunks else 0,
    )

    return chunks
