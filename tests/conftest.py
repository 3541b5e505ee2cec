"""Shared test factories."""

import itertools

import pytest

from kbcontext.entities import DocumentGroup, EntryType, KnowledgeBankEntry
from kbcontext.observability.logging import configure_logging

_ids = itertools.count(1)


def make_entry(**overrides) -> KnowledgeBankEntry:
    """Build an entry with sensible defaults."""
    data = {
        "id": f"kb-{next(_ids)}",
        "workspace_id": "ws-1",
        "type": EntryType.TEXT,
        "title": "Test Entry",
        "content": "Some content",
    }
    data.update(overrides)
    return KnowledgeBankEntry(**data)


def make_group(title: str, num_children: int, summary: str | None = None, **parent_overrides) -> DocumentGroup:
    """Build a document group whose children carry content and summaries."""
    parent = make_entry(
        id=f"p-{title}",
        type=EntryType.DOCUMENT,
        title=title,
        summary=summary,
        content="parent content",
        **parent_overrides,
    )
    children = [
        make_entry(
            id=f"c-{title}-{i}",
            type=EntryType.DOCUMENT,
            parent_entry_id=parent.id,
            title=f"{title} - Part {i + 2}",
            content=f"chunk {i + 2} content",
            summary=f"chunk {i + 2} summary",
        )
        for i in range(num_children)
    ]
    return DocumentGroup(parent=parent, children=children)


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def group_factory():
    return make_group


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep debug events out of test output."""
    configure_logging("WARNING")
