"""
ID generation utilities.

Ticket IDs are unsigned 64-bit integers shown to people as base-36 text
(``0``-``9`` then ``A``-``Z``). Arithmetic on them is checked against the
integer width instead of relying on Python's unbounded ints.
"""

import random
import string
from typing import Optional

from .errors import IntegerOverflowError, InvalidParameterError

BASE36_DIGITS = string.digits + string.ascii_uppercase
_DIGIT_VALUES = {c: i for i, c in enumerate(BASE36_DIGITS)}
_DIGIT_VALUES.update({c.lower(): i for c, i in _DIGIT_VALUES.items()})

U32_BITS = 32
U64_BITS = 64

U32_MAX = (1 << U32_BITS) - 1
U64_MAX = (1 << U64_BITS) - 1

# A ticket ID is a 5-character code of digits and letters.
TICKET_ID_LENGTH = 5
TICKET_ID_LOW = 1
TICKET_ID_HIGH = 36 ** TICKET_ID_LENGTH

_system_random = random.SystemRandom()


def _max_for(bits: int) -> int:
    return (1 << bits) - 1


def checked_add(a: int, b: int, bits: int = U64_BITS) -> int:
    """Add two unsigned integers, raising if the sum leaves ``bits``."""
    if _max_for(bits) - a < b:
        raise IntegerOverflowError(f"{a} + {b} overflows u{bits}")
    return a + b


def checked_mul(a: int, b: int, bits: int = U64_BITS) -> int:
    """Multiply two unsigned integers, raising if the product leaves ``bits``."""
    if a == 0 or b == 0:
        return 0
    if _max_for(bits) // a < b:
        raise IntegerOverflowError(f"{a} * {b} overflows u{bits}")
    return a * b


def checked_increment(value: int, bits: int = U64_BITS) -> int:
    """Return ``value + 1``, raising instead of wrapping around."""
    return checked_add(value, 1, bits)


def checked_truncate(value: int, bits: int) -> int:
    """Narrow an unsigned integer to ``bits``, raising if it does not fit."""
    if value > _max_for(bits):
        raise IntegerOverflowError(f"{value} does not fit in u{bits}")
    return value


def encode_base36(value: int) -> str:
    """Return the minimal upper-case base-36 form of an unsigned integer."""
    if value == 0:
        return "0"

    digits = []
    while value:
        value, digit = divmod(value, 36)
        digits.append(BASE36_DIGITS[digit])
    return "".join(reversed(digits))


def decode_base36(text: str, bits: int = U64_BITS) -> int:
    """
    Parse base-36 text (case-insensitive) into an unsigned integer.

    Raises InvalidParameterError for characters outside ``0-9A-Z`` and
    IntegerOverflowError as soon as the running value leaves ``bits``, however
    long the input is.
    """
    if not isinstance(text, str) or not text:
        raise InvalidParameterError(f"not a base-36 string: {text!r}")

    result = 0
    for character in text:
        digit = _DIGIT_VALUES.get(character)
        if digit is None:
            raise InvalidParameterError(f"invalid base-36 character {character!r} in {text!r}")
        result = checked_mul(result, 36, bits)
        result = checked_add(result, digit, bits)
    return result


def random_unsigned(low: int, high: int, rng: Optional[random.Random] = None) -> int:
    """
    Draw an integer in the closed range ``[low, high]``.

    A uniform 64-bit value is reduced modulo the range size, so ranges that do
    not divide 2**64 carry a small bias toward their low end.
    """
    if low > high:
        raise InvalidParameterError(f"empty range [{low}, {high}]")
    rng = rng or _system_random
    return low + rng.getrandbits(U64_BITS) % (high - low + 1)


def generate_ticket_id(rng: Optional[random.Random] = None) -> int:
    """Draw a ticket ID from the five-character range."""
    return random_unsigned(TICKET_ID_LOW, TICKET_ID_HIGH, rng)


def is_valid_ticket_id(ticket_id: str) -> bool:
    """Check that text names an ID the generator could have produced."""
    try:
        value = decode_base36(ticket_id)
    except (InvalidParameterError, IntegerOverflowError):
        return False
    return TICKET_ID_LOW <= value <= TICKET_ID_HIGH
