"""Entry snapshot files.

A snapshot is the JSON export of a workspace's knowledge bank: either a
list of entries or an object with an ``entries`` list. Keys may be
camelCase (as exported by the web app) or snake_case.
"""

import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from kbcontext.entities import KnowledgeBankEntry
from kbcontext.observability.logging import get_logger

logger = get_logger(__name__)

_ENTRY_LIST = TypeAdapter(list[KnowledgeBankEntry])


class SnapshotError(Exception):
    """Exception raised when a snapshot file cannot be read or validated."""

    pass


def parse_entries(data: object, include_disabled: bool = False) -> list[KnowledgeBankEntry]:
    """Validate raw snapshot data into entries.

    Args:
        data: Decoded JSON (list of entries or {"entries": [...]})
        include_disabled: Keep entries with enabled=false

    Returns:
        Entries in snapshot order

    Raises:
        SnapshotError: If the data does not describe a list of valid entries
    """
    if isinstance(data, dict):
        data = data.get("entries")
    if not isinstance(data, list):
        raise SnapshotError("Snapshot must be a list of entries or an object with an 'entries' list")

    try:
        entries = _ENTRY_LIST.validate_python(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid entry in snapshot: {e}") from e

    if include_disabled:
        return entries
    return [entry for entry in entries if entry.enabled]


def load_entries(path: Path, include_disabled: bool = False) -> list[KnowledgeBankEntry]:
    """Load entries from a JSON snapshot file.

    Disabled entries are dropped unless ``include_disabled`` is set.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    entries = parse_entries(raw, include_disabled=include_disabled)
    logger.debug("snapshot_loaded", path=str(path), entry_count=len(entries))
    return entries


def dump_entries(entries: Sequence[KnowledgeBankEntry], path: Path) -> None:
    """Write entries to a JSON snapshot file using camelCase keys."""
    payload = [entry.model_dump(mode="json", by_alias=True, exclude_none=True) for entry in entries]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.debug("snapshot_written", path=str(path), entry_count=len(entries))
