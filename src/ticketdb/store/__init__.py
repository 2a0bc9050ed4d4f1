"""Storage modules for tickets."""

from .table import Table, MAX_GENERATION_ATTEMPTS
from .file_store import FileStore, dumps, loads

__all__ = [
    "Table",
    "MAX_GENERATION_ATTEMPTS",
    "FileStore",
    "dumps",
    "loads",
]
