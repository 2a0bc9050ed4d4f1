"""
Text utility functions.
"""

import string

from .errors import InvalidStringError

NAME_SEPARATORS = " -"
NAME_LETTERS = frozenset(string.ascii_letters)


def canonical_name(name: str) -> str:
    """
    Bring a person's name into canonical form.

    The name is lower-cased and the first letter of every word is capitalized,
    where words are separated by spaces or dashes. A run of separators is
    collapsed into its first character and separators at either end are
    dropped, so ``"  mary--ann "`` becomes ``"Mary-Ann"``.
    """
    if not isinstance(name, str):
        raise InvalidStringError(f"name must be a string, not {type(name).__name__}")

    formatted = []
    word_start = True
    for character in name:
        if character in NAME_SEPARATORS:
            if not word_start:
                formatted.append(character)
            word_start = True
            continue
        if character not in NAME_LETTERS:
            raise InvalidStringError(f"invalid character {character!r} in name {name!r}")

        formatted.append(character.upper() if word_start else character.lower())
        word_start = False

    if formatted and formatted[-1] in NAME_SEPARATORS:
        formatted.pop()
    return "".join(formatted)


def full_name(first_name: str, last_name: str) -> str:
    """Join names the way class rosters list them: last name first."""
    return f"{last_name} {first_name}"
