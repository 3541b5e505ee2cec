"""Configuration schema using Pydantic.

Why this exists:
- Type-safe configuration with validation
- Environment variable support
- Tunable scoring weights and budget policies without code changes

How to extend:
1. Add new fields to existing config classes
2. Create new config classes for new components
3. Update kbcontext.toml with new settings
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class GenerationType(str, Enum):
    """AI generation types that determine the knowledge bank budget."""

    SINGLE = "single"
    CHAIN = "chain"
    TRANSFORM = "transform"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.WARNING
    json_logs: bool = False


class BudgetConfig(BaseModel):
    """Token budgets per generation type.

    Single-shot generations get the most room; chains pay for context on
    every step and transforms only need a light reference.
    """

    default_tokens: int = Field(default=8_000, gt=0)
    token_budgets: dict[GenerationType, int] = Field(
        default_factory=lambda: {
            GenerationType.SINGLE: 12_000,
            GenerationType.CHAIN: 4_000,
            GenerationType.TRANSFORM: 3_000,
        }
    )
    chars_per_token: int = Field(default=4, gt=0, description="Approximate characters per token")


class ChunkingConfig(BaseModel):
    """Document chunking configuration.

    - threshold: documents longer than this are split into chunks
    - boundary_min_ratio: a paragraph/sentence break is only used when it
      falls past this fraction of the threshold
    - part_label: word used in chunk titles ("Doc - Part 2")
    """

    threshold: int = Field(default=8_000, gt=0, description="Max chunk size in characters")
    boundary_min_ratio: float = Field(default=0.3, ge=0.0, lt=1.0)
    part_label: str = Field(default="Part", min_length=1)


class ScoringConfig(BaseModel):
    """Field weights for keyword relevance scoring of single entries."""

    title_weight: float = Field(default=3.0, ge=0.0)
    tag_weight: float = Field(default=2.0, ge=0.0)
    content_weight: float = Field(default=1.0, ge=0.0)
    summary_weight: float = Field(default=1.0, ge=0.0)
    min_token_length: int = Field(default=3, ge=1)
    use_tfidf: bool = True


class DocumentScoringConfig(BaseModel):
    """Signal weights for scoring whole document groups."""

    title_weight: float = Field(default=3.0, ge=0.0)
    summary_weight: float = Field(default=2.0, ge=0.0)
    max_chunk_weight: float = Field(default=1.0, ge=0.0)
    top_chunks_weight: float = Field(default=0.5, ge=0.0)
    top_chunk_count: int = Field(default=3, gt=0)


class BudgetTier(BaseModel):
    """Fractions of the document budget given to each detail level."""

    name: str
    max_documents: int | None = Field(
        default=None, description="Largest document count this tier applies to (None = unbounded)"
    )
    catalog: float = Field(..., ge=0.0, le=1.0)
    doc_summaries: float = Field(..., ge=0.0, le=1.0)
    chapter_summaries: float = Field(..., ge=0.0, le=1.0)
    raw_content: float = Field(..., ge=0.0, le=1.0)

    @model_validator(mode="after")
    def fractions_fit(self) -> "BudgetTier":
        total = self.catalog + self.doc_summaries + self.chapter_summaries + self.raw_content
        if total > 1.0 + 1e-9:
            raise ValueError(f"Tier '{self.name}' fractions sum to {total:.2f}, must be <= 1")
        return self


def _default_tiers() -> list[BudgetTier]:
    return [
        BudgetTier(
            name="deep", max_documents=2,
            catalog=0.02, doc_summaries=0.15, chapter_summaries=0.33, raw_content=0.50,
        ),
        BudgetTier(
            name="balanced", max_documents=5,
            catalog=0.05, doc_summaries=0.25, chapter_summaries=0.35, raw_content=0.35,
        ),
        BudgetTier(
            name="broad", max_documents=None,
            catalog=0.08, doc_summaries=0.35, chapter_summaries=0.35, raw_content=0.22,
        ),
    ]


class LevelPolicyConfig(BaseModel):
    """How the document budget is split across the four detail levels.

    Tiers are checked in order; the first whose max_documents covers the
    document count wins. The last tier should be unbounded.
    """

    tiers: list[BudgetTier] = Field(default_factory=_default_tiers, min_length=1)
    catalog_min_documents: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def last_tier_unbounded(self) -> "LevelPolicyConfig":
        if self.tiers[-1].max_documents is not None:
            raise ValueError("The last budget tier must have max_documents unset")
        return self


class AppConfig(BaseSettings):
    """Main application configuration.

    Loads from:
    1. Config file (TOML)
    2. Environment variables (prefixed with KBCTX_)
    3. .env file
    """

    model_config = SettingsConfigDict(
        env_prefix="KBCTX_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    app_name: str = "kbcontext"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    document_scoring: DocumentScoringConfig = Field(default_factory=DocumentScoringConfig)
    levels: LevelPolicyConfig = Field(default_factory=LevelPolicyConfig)

    def model_post_init(self, __context: Any) -> None:
        """Fill in budgets for generation types missing from a partial override."""
        defaults = BudgetConfig().token_budgets
        for generation_type, tokens in defaults.items():
            self.budget.token_budgets.setdefault(generation_type, tokens)
