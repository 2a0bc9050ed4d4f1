"""
In-memory ticket table.

The table owns every entry keyed by ticket ID and is the only place entries
are created, changed or destroyed. Every operation either completes or raises
with the table left as it was.
"""

import dataclasses
import logging
import random
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..domain.models import (
    INVALID_TICKET_ID,
    GeneratedTicketID,
    IterationDecision,
    TableEntry,
    TicketID,
)
from ..ingest.normalize import EntryFormatter
from ..utils.errors import (
    CorruptedTableError,
    EntryAlreadyExistsError,
    IdAlreadyExistsError,
    IdExpiredError,
    IdGenerationFailedError,
    IdInvalidError,
    IdNotFoundError,
    IdNotScannableError,
    InvalidParameterError,
)
from ..utils.ids import (
    U32_BITS,
    U64_MAX,
    checked_increment,
    encode_base36,
    generate_ticket_id,
)
from ..utils.text import full_name
from ..utils.time import format_scan_timestamp

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 512

EntryCallback = Callable[[TicketID, TableEntry], Optional[IterationDecision]]


class Table:
    """Keyed collection of ticket entries."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
        formatter: Optional[EntryFormatter] = None,
    ):
        """Initialize an empty table at generation 1."""
        self._entries: Dict[TicketID, TableEntry] = {}
        self._generation = 1
        self._rng = rng
        self._clock = clock
        self._formatter = formatter or EntryFormatter()

    @classmethod
    def create_new(cls, **kwargs) -> "Table":
        """Create an empty table."""
        return cls(**kwargs)

    @property
    def generation(self) -> int:
        """Current value of the staleness counter."""
        return self._generation

    # -------- Ticket ID generation --------

    def generate_ticket_id(self) -> GeneratedTicketID:
        """
        Draw a ticket ID that is not in the table.

        The ID is not reserved. It is paired with the advanced generation
        counter and can only be committed while no other insertion happened.
        """
        for _ in range(MAX_GENERATION_ATTEMPTS):
            ticket_id = generate_ticket_id(self._rng)
            if ticket_id not in self._entries:
                break
        else:
            logger.warning(
                "No free ticket ID after %d attempts (%d entries)",
                MAX_GENERATION_ATTEMPTS, len(self._entries),
            )
            raise IdGenerationFailedError(f"no free ticket ID after {MAX_GENERATION_ATTEMPTS} attempts")

        self._generation = checked_increment(self._generation)
        return GeneratedTicketID(ticket_id, self._generation)

    def is_expired(self, generated: GeneratedTicketID) -> bool:
        """Check whether the table changed since ``generated`` was drawn."""
        if generated.id == INVALID_TICKET_ID:
            raise IdInvalidError("generated ticket ID is the invalid ID")
        return generated.generation != self._generation

    def commit(self, generated: GeneratedTicketID, entry: TableEntry) -> TicketID:
        """Insert ``entry`` under a previously generated ticket ID."""
        if self.is_expired(generated):
            raise IdExpiredError(
                f"ticket ID {encode_base36(generated.id)} was generated at "
                f"{generated.generation}, table is at {self._generation}"
            )
        self.insert_with_id(generated.id, entry)
        return generated.id

    # -------- Insertion --------

    def insert(self, entry: TableEntry) -> TicketID:
        """Insert an entry under a freshly generated ticket ID."""
        return self.commit(self.generate_ticket_id(), entry)

    def insert_with_id(self, ticket_id: TicketID, entry: TableEntry) -> None:
        """
        Insert an entry under an explicit ticket ID.

        The entry is validated and formatted; the stored entry is the
        formatted copy, not ``entry`` itself.
        """
        self._check_ticket_id(ticket_id)
        entry.check_corrupted()

        if ticket_id in self._entries:
            raise IdAlreadyExistsError(f"ticket ID {encode_base36(ticket_id)} already exists")

        formatted = self._formatter.normalize(entry)
        if self._find_similar(formatted) is not None:
            raise EntryAlreadyExistsError(
                f"{formatted.first_name} {formatted.last_name} {formatted.class_name} already has a ticket"
            )

        self._generation = checked_increment(self._generation)
        self._entries[ticket_id] = formatted
        logger.debug("Inserted ticket %s (generation %d)", encode_base36(ticket_id), self._generation)

    # -------- Lookup and mutation --------

    def contains(self, ticket_id: TicketID) -> bool:
        """Check whether a ticket ID is in the table."""
        return ticket_id in self._entries

    def get_entry(self, ticket_id: TicketID) -> TableEntry:
        """Get the live entry for a ticket ID."""
        entry = self._entries.get(ticket_id)
        if entry is None:
            raise IdNotFoundError(f"ticket ID {self._display_id(ticket_id)} not found")
        entry.check_corrupted()
        return entry

    def remove(self, ticket_id: TicketID) -> TableEntry:
        """Remove a ticket and return its entry."""
        entry = self.get_entry(ticket_id)
        del self._entries[ticket_id]
        logger.debug("Removed ticket %s", encode_base36(ticket_id))
        return entry

    def purge(self, ticket_id: TicketID) -> None:
        """Delete a ticket without reading it, so corrupted entries can be cleared."""
        if ticket_id not in self._entries:
            raise IdNotFoundError(f"ticket ID {self._display_id(ticket_id)} not found")
        del self._entries[ticket_id]
        logger.info("Purged ticket %s", encode_base36(ticket_id))

    def update_entry(self, ticket_id: TicketID, entry: TableEntry) -> TableEntry:
        """
        Replace the fields of an existing ticket.

        The new fields are validated and duplicate-checked like an insertion.
        The ticket keeps its ID and scan metadata. Returns the previous fields.
        """
        current = self.get_entry(ticket_id)
        entry.check_corrupted()

        formatted = self._formatter.normalize(entry)
        similar = self._find_similar(formatted)
        if similar is not None and similar != ticket_id:
            raise EntryAlreadyExistsError(
                f"{formatted.first_name} {formatted.last_name} {formatted.class_name} already has a ticket"
            )

        previous = dataclasses.replace(current, metadata=dataclasses.replace(current.metadata))
        current.first_name = formatted.first_name
        current.last_name = formatted.last_name
        current.grade = formatted.grade
        current.grade_category = formatted.grade_category
        logger.debug("Updated ticket %s", encode_base36(ticket_id))
        return previous

    def rescan(self, ticket_id: TicketID) -> int:
        """
        Record a scan of a ticket and return its new scan count.

        Fails for tickets flagged as not scannable and when the count would
        overflow; the entry is untouched in both cases.
        """
        entry = self.get_entry(ticket_id)
        metadata = entry.metadata
        if not metadata.scannable:
            raise IdNotScannableError(f"ticket ID {encode_base36(ticket_id)} is not scannable")

        scan_count = checked_increment(metadata.scan_count, U32_BITS)
        metadata.last_scan_date = format_scan_timestamp(self._clock())
        metadata.scan_count = scan_count
        logger.debug("Scanned ticket %s (%d scans)", encode_base36(ticket_id), scan_count)
        return scan_count

    # -------- Queries --------

    def count(self) -> int:
        """Get total number of tickets."""
        return len(self._entries)

    def iter_entries(self) -> Iterator[Tuple[TicketID, TableEntry]]:
        """
        Yield ``(ticket_id, entry)`` in ticket ID order.

        Corruption is detected lazily: CorruptedTableError is raised when the
        walk reaches a corrupted entry, after the entries before it were
        yielded. Tickets removed during the walk are skipped.
        """
        for ticket_id in sorted(self._entries):
            entry = self._entries.get(ticket_id)
            if entry is None:
                continue
            if entry.is_corrupted():
                logger.warning("Corrupted entry under ticket %s", encode_base36(ticket_id))
            entry.check_corrupted(CorruptedTableError)
            yield ticket_id, entry

    def for_each(self, callback: EntryCallback) -> None:
        """Call ``callback(ticket_id, entry)`` in order until it returns BREAK."""
        for ticket_id, entry in self.iter_entries():
            if callback(ticket_id, entry) is IterationDecision.BREAK:
                break

    def find_by_name(self, first_name: str, last_name: str) -> List[TicketID]:
        """Find ticket IDs whose stored names match exactly."""
        return [
            ticket_id
            for ticket_id, entry in self.iter_entries()
            if entry.first_name == first_name and entry.last_name == last_name
        ]

    def group_by_class(self) -> Dict[Tuple[int, str], List[Tuple[str, TicketID]]]:
        """
        Group tickets by class (grade and grade category).

        Each group lists ``(full_name, ticket_id)`` sorted by full name, with
        the last name first.
        """
        groups: Dict[Tuple[int, str], List[Tuple[str, TicketID]]] = defaultdict(list)
        for ticket_id, entry in self.iter_entries():
            groups[(entry.grade, entry.grade_category)].append(
                (full_name(entry.first_name, entry.last_name), ticket_id)
            )
        return {key: sorted(groups[key]) for key in sorted(groups)}

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, ticket_id: TicketID) -> bool:
        return self.contains(ticket_id)

    # -------- Internals --------

    def _find_similar(self, entry: TableEntry) -> Optional[TicketID]:
        identity = entry.identity()
        for ticket_id, existing in self.iter_entries():
            if existing.identity() == identity:
                return ticket_id
        return None

    @staticmethod
    def _check_ticket_id(ticket_id: TicketID) -> None:
        if isinstance(ticket_id, bool) or not isinstance(ticket_id, int):
            raise InvalidParameterError(f"ticket ID must be an integer, not {type(ticket_id).__name__}")
        if not 0 <= ticket_id <= U64_MAX:
            raise InvalidParameterError(f"ticket ID {ticket_id} outside the u64 range")
        if ticket_id == INVALID_TICKET_ID:
            raise IdInvalidError("ticket ID 0 is reserved")

    @staticmethod
    def _display_id(ticket_id: TicketID) -> str:
        if isinstance(ticket_id, int) and ticket_id >= 0:
            return encode_base36(ticket_id)
        return repr(ticket_id)
