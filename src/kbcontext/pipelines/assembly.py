"""Context assembly pipeline: knowledge bank entries -> prompt context block.

Why this exists:
- Orchestrates ranking, grouping, budgeting and rendering in one call
- Produces a single size-bounded string for injection into an LLM prompt
- Degrades from full text to summaries to a bare catalog as material grows

How to use:
    from kbcontext.pipelines.assembly import ContextAssembler

    assembler = ContextAssembler(config)
    context = assembler.assemble(entries, query="pricing strategy", generation_type="chain")

Rendering order, each part stopping as soon as its budget is spent:
1. Standalone entries: pinned entries, then the full text of pinned
   documents, then unpinned entries ranked by the query
2. For unpinned document groups: catalog, document summaries, chapter
   summaries and raw content, with the remaining budget split by the level
   policy

Every block is included whole or not at all. Nothing is cached between calls.
"""

from collections.abc import Callable, Sequence

from kbcontext.config.schema import AppConfig, GenerationType
from kbcontext.core.budget import allocate_levels, resolve_budget
from kbcontext.core.context_levels import (
    BLOCK_SEPARATOR,
    CATALOG_HEADER,
    CHAPTER_SUMMARIES_HEADER,
    DOC_SUMMARIES_HEADER,
    RAW_CONTENT_HEADER,
    build_catalog,
    build_chapter_summaries,
    build_doc_summaries,
    build_flat_entries,
    build_raw_content,
)
from kbcontext.core.document_relevance import rank_document_groups
from kbcontext.core.grouping import group_entries_by_document
from kbcontext.core.relevance import rank_entries
from kbcontext.entities import DocumentGroup, KnowledgeBankEntry
from kbcontext.observability.logging import get_logger

logger = get_logger(__name__)

WRAPPER_START = "--- Workspace Knowledge Bank ---"
WRAPPER_END = "--- End Knowledge Bank ---"
WRAPPER_OVERHEAD = len(WRAPPER_START) + len(WRAPPER_END) + 2

# KBCTX_* environment overrides are read once, when this module is imported
DEFAULT_CONFIG = AppConfig()

LevelBuilder = Callable[[Sequence[DocumentGroup], int], str]


class ContextAssembler:
    """Builds the hierarchical knowledge bank context for a prompt."""

    def __init__(self, config: AppConfig | None = None):
        """Initialize the assembler.

        Args:
            config: Application configuration (scoring weights, budgets,
                level policy). DEFAULT_CONFIG is used when omitted.
        """
        self.config = config or DEFAULT_CONFIG

    def budget_for(self, generation_type: GenerationType | str | None = None) -> int:
        """Character budget for the context body."""
        return resolve_budget(generation_type, self.config.budget)

    def order_entries(
        self,
        entries: Sequence[KnowledgeBankEntry],
        query: str | None = None,
    ) -> list[KnowledgeBankEntry]:
        """Pinned entries in their original order, then unpinned ranked by the query."""
        pinned = [e for e in entries if e.pinned is True]
        unpinned = [e for e in entries if e.pinned is not True]
        return pinned + rank_entries(unpinned, query, self.config.scoring)

    def order_documents(
        self,
        documents: Sequence[DocumentGroup],
        query: str | None = None,
    ) -> list[DocumentGroup]:
        """Rank document groups, keeping groups with a pinned parent first."""
        ranked = rank_document_groups(
            documents, query, self.config.document_scoring, self.config.scoring
        )
        pinned = [g for g in ranked if g.parent.pinned is True]
        return pinned + [g for g in ranked if g.parent.pinned is not True]

    def assemble(
        self,
        entries: Sequence[KnowledgeBankEntry],
        query: str | None = None,
        generation_type: GenerationType | str | None = None,
    ) -> str:
        """Assemble the context block.

        Args:
            entries: Snapshot of enabled entries for one workspace
            query: The user's current prompt, used for ranking
            generation_type: single / chain / transform, or None for default

        Returns:
            The wrapped context block, or "" when nothing fits
        """
        if not entries:
            return ""

        budget = self.budget_for(generation_type)
        grouped = group_entries_by_document(self.order_entries(entries, query))
        sections: list[str] = []

        ranked = self.order_documents(grouped.documents, query)
        pinned_documents = [g for g in ranked if g.parent.pinned is True]
        documents = [g for g in ranked if g.parent.pinned is not True]

        flat = build_flat_entries(grouped.standalone, budget, pinned_documents)
        if flat:
            sections.append(flat)

        tier_name = None
        if documents:
            remaining = budget - _joined_length(sections)
            levels = allocate_levels(remaining, len(documents), self.config.levels)
            tier_name = levels.tier

            plan: list[tuple[str, LevelBuilder, int]] = [
                (DOC_SUMMARIES_HEADER, build_doc_summaries, levels.doc_summaries),
                (CHAPTER_SUMMARIES_HEADER, build_chapter_summaries, levels.chapter_summaries),
                (RAW_CONTENT_HEADER, build_raw_content, levels.raw_content),
            ]
            if len(documents) >= self.config.levels.catalog_min_documents:
                plan.insert(0, (CATALOG_HEADER, build_catalog, levels.catalog))

            for header, builder, level_budget in plan:
                section = _render_section(header, builder, documents, level_budget)
                if section:
                    sections.append(section)

        logger.debug(
            "context_assembled",
            entry_count=len(entries),
            standalone_count=len(grouped.standalone),
            document_count=len(grouped.documents),
            pinned_document_count=len(pinned_documents),
            tier=tier_name,
            budget=budget,
            section_count=len(sections),
            output_chars=_joined_length(sections),
        )

        if not sections:
            return ""
        return f"{WRAPPER_START}\n{BLOCK_SEPARATOR.join(sections)}\n{WRAPPER_END}"


def _joined_length(sections: Sequence[str]) -> int:
    if not sections:
        return 0
    return sum(len(s) for s in sections) + len(BLOCK_SEPARATOR) * (len(sections) - 1)


def _render_section(
    header: str,
    builder: LevelBuilder,
    documents: Sequence[DocumentGroup],
    level_budget: int,
) -> str:
    """Header plus body, with the header and separator charged to the level budget."""
    body_budget = level_budget - len(header) - 1 - len(BLOCK_SEPARATOR)
    if body_budget <= 0:
        return ""
    body = builder(documents, body_budget)
    if not body:
        return ""
    return f"{header}\n{body}"


def build_knowledge_context(
    entries: Sequence[KnowledgeBankEntry],
    query: str | None = None,
    generation_type: GenerationType | str | None = None,
    config: AppConfig | None = None,
) -> str:
    """Assemble the knowledge bank context block with a one-off assembler."""
    return ContextAssembler(config).assemble(entries, query, generation_type)
