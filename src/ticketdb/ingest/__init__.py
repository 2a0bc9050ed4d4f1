"""Validation and normalization of ticket entries."""

from .validators import Validator, EntryValidator
from .normalize import Normalizer, EntryFormatter, format_entry, format_name

__all__ = [
    "Validator",
    "EntryValidator",
    "Normalizer",
    "EntryFormatter",
    "format_entry",
    "format_name",
]
