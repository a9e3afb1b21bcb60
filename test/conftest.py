from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

SUBJECT_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")
T0 = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


class TickingClock:
    """Returns T0, T0 + 1s, T0 + 2s, ... on successive calls."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def clock():
    return TickingClock()
