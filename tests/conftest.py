"""
Shared fixtures for study timer tests.
"""

import pytest
from datetime import date, datetime
from store import StudyStore


class FixedClock:
    """Clock pinned to a single instant."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def today(self) -> date:
        return self.moment.date()

    def now(self) -> datetime:
        return self.moment


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 15, 9, 30, 0))


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "study_data.json"


@pytest.fixture
def store(data_file, clock):
    """Empty store backed by a file in tmp_path."""
    return StudyStore.load(data_file, clock=clock)
