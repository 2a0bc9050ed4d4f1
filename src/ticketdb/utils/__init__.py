"""Utility modules."""

from .time import format_scan_timestamp, parse_scan_timestamp, NO_SCAN_DATE
from .text import canonical_name, full_name
from .ids import encode_base36, decode_base36, generate_ticket_id, is_valid_ticket_id
from .errors import TicketDBError, ValidationError, StorageError, CorruptionError

__all__ = [
    "format_scan_timestamp",
    "parse_scan_timestamp",
    "NO_SCAN_DATE",
    "canonical_name",
    "full_name",
    "encode_base36",
    "decode_base36",
    "generate_ticket_id",
    "is_valid_ticket_id",
    "TicketDBError",
    "ValidationError",
    "StorageError",
    "CorruptionError",
]
