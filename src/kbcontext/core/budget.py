"""Context budgeting.

Converts a generation type into a character budget and splits a document
budget across the four detail levels (catalog, document summaries, chapter
summaries, raw content). The split depends on how many documents compete
for space: a lone document gets most of its budget as raw text, many
documents get broader, shallower coverage.
"""

from dataclasses import dataclass

from kbcontext.config.schema import BudgetConfig, BudgetTier, GenerationType, LevelPolicyConfig
from kbcontext.observability.logging import get_logger

__all__ = [
    "BudgetTier",
    "GenerationType",
    "LevelBudgets",
    "allocate_levels",
    "resolve_budget",
    "resolve_token_budget",
    "select_tier",
]

logger = get_logger(__name__)


def resolve_token_budget(
    generation_type: GenerationType | str | None = None,
    config: BudgetConfig | None = None,
) -> int:
    """Token budget for a generation type, falling back to the default.

    An empty or unrecognised generation type gets the default budget.
    """
    config = config or BudgetConfig()
    if not generation_type:
        return config.default_tokens
    try:
        generation_type = GenerationType(generation_type)
    except ValueError:
        logger.warning(
            "unknown_generation_type",
            generation_type=generation_type,
            fallback_tokens=config.default_tokens,
        )
        return config.default_tokens
    return config.token_budgets.get(generation_type, config.default_tokens)


def resolve_budget(
    generation_type: GenerationType | str | None = None,
    config: BudgetConfig | None = None,
) -> int:
    """Character budget for a generation type."""
    config = config or BudgetConfig()
    return resolve_token_budget(generation_type, config) * config.chars_per_token


def select_tier(document_count: int, policy: LevelPolicyConfig | None = None) -> BudgetTier:
    """Pick the budget tier covering ``document_count`` documents."""
    policy = policy or LevelPolicyConfig()
    for tier in policy.tiers:
        if tier.max_documents is None or document_count <= tier.max_documents:
            return tier
    return policy.tiers[-1]


@dataclass(frozen=True)
class LevelBudgets:
    """Character budgets for each detail level."""

    tier: str
    catalog: int
    doc_summaries: int
    chapter_summaries: int
    raw_content: int

    @property
    def total(self) -> int:
        return self.catalog + self.doc_summaries + self.chapter_summaries + self.raw_content


def allocate_levels(
    total: int,
    document_count: int,
    policy: LevelPolicyConfig | None = None,
) -> LevelBudgets:
    """Split ``total`` characters across the detail levels."""
    tier = select_tier(document_count, policy)
    total = max(total, 0)
    return LevelBudgets(
        tier=tier.name,
        catalog=int(total * tier.catalog),
        doc_summaries=int(total * tier.doc_summaries),
        chapter_summaries=int(total * tier.chapter_summaries),
        raw_content=int(total * tier.raw_content),
    )
