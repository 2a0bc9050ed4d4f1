"""
Tests for base-36 ticket IDs and checked arithmetic.
"""

import random

import pytest

from ticketdb.utils.errors import IntegerOverflowError, InvalidParameterError
from ticketdb.utils.ids import (
    TICKET_ID_HIGH,
    U32_MAX,
    U64_MAX,
    checked_add,
    checked_increment,
    checked_mul,
    checked_truncate,
    decode_base36,
    encode_base36,
    generate_ticket_id,
    is_valid_ticket_id,
    random_unsigned,
)


def test_encode_zero():
    assert encode_base36(0) == "0"


def test_encode_known_values():
    assert encode_base36(35) == "Z"
    assert encode_base36(36) == "10"
    assert encode_base36(TICKET_ID_HIGH - 1) == "ZZZZZ"
    assert encode_base36(TICKET_ID_HIGH) == "100000"


def test_decode_is_case_insensitive():
    assert decode_base36("zz") == decode_base36("ZZ") == 35 * 36 + 35


def test_round_trip_over_ticket_range():
    """decode(encode(x)) == x at the boundaries and over a sample of the range."""
    rng = random.Random(7)
    values = [0, 1, 35, 36, TICKET_ID_HIGH - 1, TICKET_ID_HIGH, U64_MAX]
    values += [rng.randrange(TICKET_ID_HIGH) for _ in range(2000)]
    for value in values:
        assert decode_base36(encode_base36(value)) == value


def test_decode_rejects_non_base36_characters():
    for text in ["AB-C", "12 3", "Ä1", "ß", "", "1.5"]:
        with pytest.raises(InvalidParameterError):
            decode_base36(text)


def test_decode_rejects_non_strings():
    with pytest.raises(InvalidParameterError):
        decode_base36(12345)


def test_decode_overflow_on_long_input():
    """Overflow is detected even for inputs far longer than a ticket ID."""
    assert decode_base36(encode_base36(U64_MAX)) == U64_MAX
    with pytest.raises(IntegerOverflowError):
        decode_base36(encode_base36(U64_MAX + 1))
    with pytest.raises(IntegerOverflowError):
        decode_base36("Z" * 200)


def test_checked_arithmetic():
    assert checked_add(U64_MAX - 1, 1) == U64_MAX
    with pytest.raises(IntegerOverflowError):
        checked_add(U64_MAX, 1)
    assert checked_mul(0, U64_MAX) == 0
    with pytest.raises(IntegerOverflowError):
        checked_mul(1 << 63, 2)
    assert checked_increment(U32_MAX - 1, 32) == U32_MAX
    with pytest.raises(IntegerOverflowError):
        checked_increment(U32_MAX, 32)
    assert checked_truncate(255, 8) == 255
    with pytest.raises(IntegerOverflowError):
        checked_truncate(256, 8)


def test_random_unsigned_stays_in_range():
    rng = random.Random(99)
    for _ in range(1000):
        assert 3 <= random_unsigned(3, 7, rng) <= 7
    assert random_unsigned(5, 5, rng) == 5


def test_random_unsigned_rejects_empty_range():
    with pytest.raises(InvalidParameterError):
        random_unsigned(2, 1)


def test_random_unsigned_reduces_modulo_range():
    """A raw 64-bit draw maps to low + draw % size, keeping the modulo bias."""
    class Fixed(random.Random):
        def getrandbits(self, k):
            return U64_MAX

    assert random_unsigned(1, TICKET_ID_HIGH, Fixed()) == 1 + U64_MAX % TICKET_ID_HIGH


def test_generate_ticket_id_range():
    rng = random.Random(3)
    for _ in range(1000):
        assert 1 <= generate_ticket_id(rng) <= TICKET_ID_HIGH


def test_is_valid_ticket_id():
    assert is_valid_ticket_id("3f9zk")
    assert is_valid_ticket_id("100000")
    assert not is_valid_ticket_id("0")
    assert not is_valid_ticket_id("100001")
    assert not is_valid_ticket_id("AB-CD")
    assert not is_valid_ticket_id("")
