"""
File-based storage for the ticket table.

A table is persisted as one YAML document::

    info:
      name: CNGC-BB-2024
      tickets: 1
    entries:
    - ticket_id: 3F9ZK
      first_name: John
      last_name: O Doe
      grade: 10
      grade_category: B
      metadata:
        flags: 0
        scan_count: 0
        last_scan_date: N/A

Loading replays every entry through Table.insert_with_id, so a document is
held to the same rules as live insertions.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..domain.models import EntryFlag, EntryMetadata, TableEntry
from ..utils.errors import CorruptedTableError, InvalidFilepathError, InvalidYAMLError
from ..utils.ids import U32_MAX, decode_base36, encode_base36
from ..utils.time import NO_SCAN_DATE
from .table import Table

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "CNGC-BB-2024"

# Files written before the field was renamed use "grade_id".
GRADE_CATEGORY_ALIASES = ("grade_category", "grade_id")


def _require(node: Dict[str, Any], key: str, expected: type, where: str) -> Any:
    """Fetch a required field of the given type from a mapping node."""
    value = node.get(key)
    if value is None:
        raise InvalidYAMLError(f"{where}: missing field '{key}'")
    # bool is an int subclass; YAML turns yes/no/on/off into bools
    if isinstance(value, bool) and expected is not bool:
        raise InvalidYAMLError(f"{where}: field '{key}' must be {expected.__name__}, got bool")
    if not isinstance(value, expected):
        raise InvalidYAMLError(
            f"{where}: field '{key}' must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _require_u32(node: Dict[str, Any], key: str, where: str) -> int:
    value = _require(node, key, int, where)
    if not 0 <= value <= U32_MAX:
        raise InvalidYAMLError(f"{where}: field '{key}' outside the u32 range")
    return value


def _entry_to_node(ticket_id: int, entry: TableEntry) -> Dict[str, Any]:
    metadata = entry.metadata
    return {
        "ticket_id": encode_base36(ticket_id),
        "first_name": entry.first_name,
        "last_name": entry.last_name,
        "grade": int(entry.grade),
        "grade_category": entry.grade_category,
        "metadata": {
            "flags": int(metadata.flags),
            "scan_count": int(metadata.scan_count),
            "last_scan_date": metadata.last_scan_date or NO_SCAN_DATE,
        },
    }


def _node_to_entry(node: Any, index: int) -> Tuple[int, TableEntry]:
    where = f"entries[{index}]"
    if not isinstance(node, dict):
        raise InvalidYAMLError(f"{where}: expected a mapping")

    # Unquoted all-digit IDs come back from YAML as ints.
    ticket_id_text = node.get("ticket_id")
    if isinstance(ticket_id_text, int) and not isinstance(ticket_id_text, bool):
        ticket_id_text = str(ticket_id_text)
    if not isinstance(ticket_id_text, str):
        raise InvalidYAMLError(f"{where}: field 'ticket_id' must be a string")

    first_name = _require(node, "first_name", str, where)
    last_name = _require(node, "last_name", str, where)
    grade = _require(node, "grade", int, where)

    category_key = next((k for k in GRADE_CATEGORY_ALIASES if k in node), GRADE_CATEGORY_ALIASES[0])
    grade_category = _require(node, category_key, str, where)
    if len(grade_category) != 1:
        raise InvalidYAMLError(f"{where}: field '{category_key}' must be a single character")

    metadata_node = _require(node, "metadata", dict, where)
    flags = _require_u32(metadata_node, "flags", where + ".metadata")
    scan_count = _require_u32(metadata_node, "scan_count", where + ".metadata")
    last_scan_date = _require(metadata_node, "last_scan_date", str, where + ".metadata")

    entry = TableEntry(
        first_name=first_name,
        last_name=last_name,
        grade=grade,
        grade_category=grade_category,
        metadata=EntryMetadata(
            flags=EntryFlag(flags),
            scan_count=scan_count,
            last_scan_date="" if last_scan_date == NO_SCAN_DATE else last_scan_date,
        ),
    )
    return decode_base36(ticket_id_text), entry


def dumps(table: Table, name: str = DEFAULT_TABLE_NAME) -> str:
    """Render a table as a YAML document, entries in ticket ID order."""
    entries = [_entry_to_node(ticket_id, entry) for ticket_id, entry in table.iter_entries()]
    document = {
        "info": {"name": name, "tickets": len(entries)},
        "entries": entries,
    }
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False, allow_unicode=True)


def loads(text: Union[str, bytes], **table_kwargs) -> Table:
    """
    Rebuild a table from a YAML document.

    Raises InvalidYAMLError for malformed documents, the table's own errors
    for entries that could not be inserted live, and CorruptedTableError when
    the header count disagrees with the entries.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidYAMLError(f"not a YAML document: {exc}") from exc

    if not isinstance(document, dict):
        raise InvalidYAMLError("expected a mapping at the top level")
    info = _require(document, "info", dict, "document")
    entries = _require(document, "entries", list, "document")

    table = Table.create_new(**table_kwargs)
    for index, node in enumerate(entries):
        ticket_id, entry = _node_to_entry(node, index)
        table.insert_with_id(ticket_id, entry)

    declared = _require_u32(info, "tickets", "info")
    if declared != table.count():
        raise CorruptedTableError(
            f"header declares {declared} tickets, document holds {table.count()}"
        )
    return table


class FileStore:
    """File-based ticket table storage."""

    def __init__(self, path: Union[str, Path], name: str = DEFAULT_TABLE_NAME):
        """Initialize file store for one database file."""
        self.path = Path(path)
        self.name = name

    @classmethod
    def from_config(cls, config) -> "FileStore":
        """Create a file store from the configured path and table name."""
        return cls(config.get("database_path"), name=config.get("table_name"))

    def exists(self) -> bool:
        """Check whether the database file exists."""
        return self.path.is_file()

    def load(self, **table_kwargs) -> Table:
        """Load the table from the database file."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise InvalidFilepathError(f"cannot read {self.path}: {exc}") from exc

        table = loads(text, **table_kwargs)
        logger.info("Loaded %d tickets from %s", table.count(), self.path)
        return table

    def load_or_create(self, **table_kwargs) -> Table:
        """Load the database file, or start an empty table if there is none yet."""
        if not self.exists():
            logger.info("No database at %s, starting an empty table", self.path)
            return Table.create_new(**table_kwargs)
        return self.load(**table_kwargs)

    def save(self, table: Table, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save the table to the database file, or to ``path`` if given.

        The document is rendered before the file is opened, so a table that
        cannot be saved leaves an existing file untouched.
        """
        target = Path(path) if path is not None else self.path
        text = dumps(table, self.name)
        try:
            with open(target, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise InvalidFilepathError(f"cannot write {target}: {exc}") from exc

        logger.info("Saved %d tickets to %s", table.count(), target)
        return target
