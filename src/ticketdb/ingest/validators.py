"""
Validators for ensuring ticket entries are well-formed.
"""

from typing import List

from ..domain.models import TableEntry
from ..utils.errors import (
    InvalidEntryFieldError,
    InvalidStringError,
    TicketDBError,
)
from ..utils.text import NAME_LETTERS, NAME_SEPARATORS

ALLOWED_GRADE_LOW = 9
ALLOWED_GRADE_HIGH = 12

ALLOWED_GRADE_CATEGORY_LOW = "A"
ALLOWED_GRADE_CATEGORY_HIGH = "F"
ALLOWED_GRADE_CATEGORIES = frozenset(
    chr(c) for c in range(ord(ALLOWED_GRADE_CATEGORY_LOW), ord(ALLOWED_GRADE_CATEGORY_HIGH) + 1)
)


class Validator:
    """Base validator interface."""

    def validate(self, entry: TableEntry) -> List[TicketDBError]:
        """Validate an entry and return list of errors."""
        raise NotImplementedError

    def check(self, entry: TableEntry) -> None:
        """Raise the first error validate() reports."""
        errors = self.validate(entry)
        if errors:
            raise errors[0]


class EntryValidator(Validator):
    """
    Validator for ticket entry fields.

    Reports problems in the order they are fixed by formatting: grade, grade
    category, first name, last name. Integrity tags are checked by the caller.
    """

    def validate(self, entry: TableEntry) -> List[TicketDBError]:
        errors: List[TicketDBError] = []

        grade = entry.grade
        if isinstance(grade, bool) or not isinstance(grade, int):
            errors.append(InvalidEntryFieldError("grade must be an integer", "grade"))
        elif not ALLOWED_GRADE_LOW <= grade <= ALLOWED_GRADE_HIGH:
            errors.append(InvalidEntryFieldError(
                f"grade {grade} outside {ALLOWED_GRADE_LOW}-{ALLOWED_GRADE_HIGH}", "grade"
            ))

        category = entry.grade_category
        if not isinstance(category, str) or len(category) != 1:
            errors.append(InvalidEntryFieldError(
                "grade_category must be a single character", "grade_category"
            ))
        elif category.upper() not in ALLOWED_GRADE_CATEGORIES:
            errors.append(InvalidEntryFieldError(
                f"grade_category {category!r} outside "
                f"{ALLOWED_GRADE_CATEGORY_LOW}-{ALLOWED_GRADE_CATEGORY_HIGH}",
                "grade_category",
            ))

        for field_name in ("first_name", "last_name"):
            value = getattr(entry, field_name)
            if not isinstance(value, str):
                errors.append(InvalidStringError(f"{field_name} must be a string", field_name))
                continue
            bad = [c for c in value if c not in NAME_LETTERS and c not in NAME_SEPARATORS]
            if bad:
                errors.append(InvalidStringError(
                    f"{field_name} contains invalid character {bad[0]!r}", field_name
                ))

        return errors
