"""Shared pytest fixtures for ticket table tests."""
import random
from datetime import datetime, timedelta

import pytest

from ticketdb.domain.models import TableEntry
from ticketdb.store.file_store import FileStore
from ticketdb.store.table import Table


class FakeClock:
    """Fake clock for deterministic scan timestamps."""
    def __init__(self, start_time: datetime = None):
        self._now = start_time or datetime(2024, 1, 1, 12, 0, 0)

    def now(self):
        return self._now

    def advance(self, **kwargs):
        self._now += timedelta(**kwargs)
        return self._now


class SequenceRandom(random.Random):
    """Random source whose 64-bit draws come from a fixed list."""
    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def getrandbits(self, k):
        return self._values.pop(0)


@pytest.fixture
def fake_clock():
    """Create a fake clock for time-based tests."""
    return FakeClock()


@pytest.fixture
def table(fake_clock):
    """Create an empty table with a seeded RNG."""
    return Table.create_new(rng=random.Random(1234), clock=fake_clock.now)


@pytest.fixture
def sample_entry():
    """Create an unformatted entry."""
    return TableEntry(first_name="john", last_name="o doe", grade=10, grade_category="b")


@pytest.fixture
def other_entry():
    """Create a second, distinct entry."""
    return TableEntry(first_name="Ana-Maria", last_name="Pop", grade=12, grade_category="F")


@pytest.fixture
def file_store(tmp_path):
    """Create a file store in a temp directory."""
    return FileStore(tmp_path / "tickets.yaml")


@pytest.fixture
def make_entries():
    """Factory building ``count`` distinct valid entries."""
    return _make_entries


def _make_entries(count):
    letters = "abcdefghijklmnopqrstuvwxyz"
    entries = []
    for i in range(count):
        first = letters[i % 26] + letters[(i // 26) % 26] + letters[(i // 676) % 26]
        entries.append(TableEntry(
            first_name=f"{first}name",
            last_name="Student",
            grade=9 + i % 4,
            grade_category="ABCDEF"[i % 6],
        ))
    return entries
