"""KnowledgeBankEntry entity - one unit of workspace reference material."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EntryType(str, Enum):
    """Supported entry types in the knowledge bank."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"


class DocumentSummaryStatus(str, Enum):
    """Availability of a document-level summary on a parent entry."""

    PENDING = "pending"
    READY = "ready"


_KIND_LABELS: dict[EntryType, str] = {
    EntryType.TEXT: "Text",
    EntryType.IMAGE: "Image description",
    EntryType.DOCUMENT: "Document",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KnowledgeBankEntry(BaseModel):
    """A single entry in a workspace's knowledge bank.

    The entry ``type`` (text/image/document) and whether the entry is a child
    chunk of a longer document (``parent_entry_id`` set) are independent:
    a chunk is always a document, but not every document is a chunk.

    Snapshots exported by the web app use camelCase keys, so both
    ``parentEntryId`` and ``parent_entry_id`` are accepted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=lambda: f"kb-{uuid4().hex[:12]}")
    workspace_id: str = Field(..., description="Workspace this entry belongs to")
    type: EntryType = EntryType.TEXT
    title: str
    content: str = Field(default="", description="Processed text (for images: AI description)")
    summary: str | None = Field(None, description="AI-generated summary, produced out-of-band")
    tags: list[str] = Field(default_factory=list)
    pinned: bool = False
    parent_entry_id: str | None = Field(None, description="Parent document entry for chunks")
    chunk_index: int | None = Field(None, ge=0, description="Position of a chunk in its document")
    document_summary_status: DocumentSummaryStatus | None = None
    original_file_name: str | None = None
    mime_type: str | None = None
    enabled: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Entry title cannot be empty")
        return v

    @field_validator("summary")
    @classmethod
    def blank_summary_is_absent(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(tag for tag in v if tag.strip()))

    @property
    def is_chunk(self) -> bool:
        """True when this entry is a child chunk of another entry."""
        return self.parent_entry_id is not None

    @property
    def effective_summary(self) -> str | None:
        """The summary if it carries text, else None."""
        if self.summary and self.summary.strip():
            return self.summary
        return None

    @property
    def context_text(self) -> str:
        """Text used when injecting this entry: summary preferred over content."""
        return self.effective_summary or self.content

    @property
    def kind_label(self) -> str:
        """Human-facing label for the entry type."""
        return _KIND_LABELS[self.type]
