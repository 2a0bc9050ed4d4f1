"""Event ticket table: ID generation, validation and YAML persistence."""

from .config import Config, configure_logging
from .domain.models import EntryFlag, EntryMetadata, GeneratedTicketID, IterationDecision, TableEntry
from .store.file_store import FileStore
from .store.table import Table

__version__ = "0.1.0"

__all__ = [
    "Config",
    "configure_logging",
    "EntryFlag",
    "EntryMetadata",
    "GeneratedTicketID",
    "IterationDecision",
    "TableEntry",
    "FileStore",
    "Table",
]
