"""
Domain models for event tickets and related entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntFlag
from typing import Optional, Type

from ..utils.errors import CorruptedTableEntryError, CorruptionError
from ..utils.time import parse_scan_timestamp

TicketID = int

INVALID_TICKET_ID: TicketID = 0
INVALID_GENERATION = 0


def four_byte_tag(text: str) -> int:
    """Pack four characters into an int, first character most significant."""
    return int.from_bytes(text.encode("ascii"), "big")


# Every entry must carry this tag; anything else marks it as corrupted.
ENTRY_TAG = four_byte_tag("OPTE")


class EntryFlag(IntFlag):
    """Flags stored in an entry's metadata."""
    NONE = 0
    NOT_SCANNABLE = 1 << 0


class IterationDecision(Enum):
    """Returned by table callbacks to keep walking or stop."""
    BREAK = "break"
    CONTINUE = "continue"


@dataclass
class EntryMetadata:
    """Scan bookkeeping for a ticket."""

    flags: EntryFlag = EntryFlag.NONE
    scan_count: int = 0
    last_scan_date: str = ""

    @property
    def scannable(self) -> bool:
        return not self.flags & EntryFlag.NOT_SCANNABLE

    @property
    def last_scanned_at(self) -> Optional[datetime]:
        return parse_scan_timestamp(self.last_scan_date)


@dataclass
class TableEntry:
    """Represents one attendee's ticket."""

    first_name: str
    last_name: str
    grade: int
    grade_category: str
    metadata: EntryMetadata = field(default_factory=EntryMetadata)
    tag: int = ENTRY_TAG

    def is_corrupted(self) -> bool:
        """Check the integrity tag."""
        return self.tag != ENTRY_TAG

    def check_corrupted(self, error_cls: Type[CorruptionError] = CorruptedTableEntryError) -> None:
        """Raise ``error_cls`` if the entry is corrupted."""
        if self.is_corrupted():
            raise error_cls(f"entry tag {self.tag!r} does not match {ENTRY_TAG:#x}")

    def identity(self) -> tuple:
        """The fields that make two entries the same person."""
        return (self.first_name, self.last_name, self.grade, self.grade_category)

    @property
    def class_name(self) -> str:
        return f"{self.grade}{self.grade_category}"


@dataclass(frozen=True)
class GeneratedTicketID:
    """
    A ticket ID drawn by the table but not yet inserted.

    ``generation`` snapshots the table's counter at the time of the draw; the
    ID may only be committed while the counter still has that value.
    """

    id: TicketID
    generation: int
