"""Service layer - helpers around the pure core.

- load_entries / dump_entries: JSON snapshot files
- build_document_entries: parent/child entries for long text
"""

from kbcontext.service.documents import build_document_entries
from kbcontext.service.snapshot import SnapshotError, dump_entries, load_entries, parse_entries

__all__ = [
    "SnapshotError",
    "build_document_entries",
    "dump_entries",
    "load_entries",
    "parse_entries",
]
