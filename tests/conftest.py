import typing as tp

import pytest

from memfetch import BaseClock


class FixedClock(BaseClock):
    def __init__(self, timestamp: float) -> None:
        self.timestamp = timestamp

    def now(self) -> float:
        return self.timestamp


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock_at() -> tp.Type[FixedClock]:
    return FixedClock
