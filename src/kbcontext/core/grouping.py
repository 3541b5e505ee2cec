"""Document grouping - rebuild parent/child chunk sets from a flat entry list."""

import re
from collections import defaultdict
from collections.abc import Sequence

from kbcontext.entities import DocumentGroup, GroupedEntries, KnowledgeBankEntry

_PART_SUFFIX = re.compile(r"\s+-\s+Part\s+0*(\d+)\s*$", re.IGNORECASE)


def part_number(title: str) -> int | None:
    """Part number from a trailing " - Part N" suffix, if any."""
    match = _PART_SUFFIX.search(title)
    return int(match.group(1)) if match else None


def get_display_title(entry: KnowledgeBankEntry) -> str:
    """Title without a trailing " - Part N" suffix, for human-facing display.

    Only one suffix is stripped; the stored title is left untouched.
    """
    return _PART_SUFFIX.sub("", entry.title, count=1)


def _chunk_order_key(entry: KnowledgeBankEntry, position: int) -> tuple[int, int, int]:
    if entry.chunk_index is not None:
        return (0, entry.chunk_index, position)
    number = part_number(entry.title)
    if number is not None:
        return (0, number - 1, position)
    return (1, 0, position)


def group_entries_by_document(entries: Sequence[KnowledgeBankEntry]) -> GroupedEntries:
    """Partition entries into standalone entries and document groups.

    Entries with a parent_entry_id are children. Non-children with at least
    one child become a DocumentGroup; everything else is standalone,
    including orphaned children whose parent is not in ``entries``.
    Input order is preserved for standalone entries and groups.
    """
    children_by_parent: dict[str, list[tuple[int, KnowledgeBankEntry]]] = defaultdict(list)
    non_children: list[KnowledgeBankEntry] = []

    for position, entry in enumerate(entries):
        if entry.parent_entry_id is not None:
            children_by_parent[entry.parent_entry_id].append((position, entry))
        else:
            non_children.append(entry)

    result = GroupedEntries()
    claimed: set[str] = set()

    for entry in non_children:
        children = children_by_parent.get(entry.id)
        if children and entry.id not in claimed:
            claimed.add(entry.id)
            ordered = sorted(children, key=lambda item: _chunk_order_key(item[1], item[0]))
            result.documents.append(
                DocumentGroup(parent=entry, children=[child for _, child in ordered])
            )
        else:
            result.standalone.append(entry)

    result.standalone.extend(
        entry for entry in entries
        if entry.parent_entry_id is not None and entry.parent_entry_id not in claimed
    )

    return result
