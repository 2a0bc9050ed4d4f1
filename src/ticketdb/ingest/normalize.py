"""
Normalizers for bringing ticket entries into canonical form.
"""

import dataclasses
from typing import Optional

from ..domain.models import TableEntry
from ..utils.text import canonical_name
from .validators import EntryValidator


class Normalizer:
    """Base normalizer interface."""

    def normalize(self, entry: TableEntry) -> TableEntry:
        """Normalize an entry into its stored form."""
        raise NotImplementedError


class EntryFormatter(Normalizer):
    """Validates an entry and returns its canonical copy."""

    def __init__(self, validator: Optional[EntryValidator] = None):
        self.validator = validator or EntryValidator()

    def normalize(self, entry: TableEntry) -> TableEntry:
        """
        Return a formatted copy of ``entry``; the argument is left untouched.

        Formatting is idempotent, so an entry that already went through here
        comes back equal to itself.
        """
        entry.check_corrupted()
        self.validator.check(entry)

        return dataclasses.replace(
            entry,
            first_name=canonical_name(entry.first_name),
            last_name=canonical_name(entry.last_name),
            grade_category=entry.grade_category.upper(),
            metadata=dataclasses.replace(entry.metadata),
        )


_default_formatter = EntryFormatter()


def format_entry(entry: TableEntry) -> TableEntry:
    """Validate and canonicalize an entry with the default formatter."""
    return _default_formatter.normalize(entry)


def format_name(name: str) -> str:
    """Canonical form of a single name field."""
    return canonical_name(name)
