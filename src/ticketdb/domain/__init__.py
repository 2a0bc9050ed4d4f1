"""Domain models for the ticket table."""

from .models import (
    ENTRY_TAG,
    INVALID_TICKET_ID,
    EntryFlag,
    EntryMetadata,
    GeneratedTicketID,
    IterationDecision,
    TableEntry,
    TicketID,
)

__all__ = [
    "ENTRY_TAG",
    "INVALID_TICKET_ID",
    "EntryFlag",
    "EntryMetadata",
    "GeneratedTicketID",
    "IterationDecision",
    "TableEntry",
    "TicketID",
]
