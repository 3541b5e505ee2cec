"""DocumentGroup entity - a parent entry with its child chunks."""

from dataclasses import dataclass, field

from kbcontext.entities.entry import KnowledgeBankEntry


@dataclass(frozen=True)
class DocumentGroup:
    """A parent document entry grouped with its ordered child chunks.

    This is a read-only view: ``parent`` and ``children`` are the same
    objects that were passed to the grouper.
    """

    parent: KnowledgeBankEntry
    children: list[KnowledgeBankEntry]

    @property
    def total_parts(self) -> int:
        return 1 + len(self.children)

    @property
    def chunks(self) -> list[KnowledgeBankEntry]:
        """Parent followed by children, in document order."""
        return [self.parent, *self.children]


@dataclass
class GroupedEntries:
    """Result of grouping entries by document relationship."""

    standalone: list[KnowledgeBankEntry] = field(default_factory=list)
    documents: list[DocumentGroup] = field(default_factory=list)
