"""Shared fixtures for heart monitor tests."""

import asyncio
from typing import List, Optional, Union

import pytest

from heart_monitor.core.config import Config
from heart_monitor.core.exceptions import TransportOpenError
from heart_monitor.data_acquisition.transport import Transport


class FakeClock:
    """Manually advanced seconds clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport(Transport):
    """In-memory transport fed from the test through a queue.

    Pushing ``None`` ends the stream; pushing an exception makes the next
    read raise it.
    """

    def __init__(self, fail_open: Optional[Exception] = None):
        self.fail_open = fail_open
        self.open_count = 0
        self.close_count = 0
        self._queue: Optional[asyncio.Queue] = None
        self._open = False

    async def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self._queue = asyncio.Queue()
        self._open = True
        self.open_count += 1

    async def read(self) -> bytes:
        item = await self._queue.get()
        if item is None:
            return b""
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        if self._open:
            self._open = False
            self.close_count += 1

    @property
    def is_open(self) -> bool:
        return self._open

    def push(self, item: Union[bytes, str, None, Exception]) -> None:
        if isinstance(item, str):
            item = item.encode("utf-8")
        self._queue.put_nowait(item)

    def push_lines(self, lines: List[str]) -> None:
        self.push("".join(f"{line}\n" for line in lines))


async def settle(rounds: int = 5) -> None:
    """Let pending tasks process queued chunks."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def config() -> Config:
    return Config.create_default("/dev/ttyTEST")


@pytest.fixture
def fast_config() -> Config:
    """Config whose timers never fire during a test unless asked to."""
    config = Config.create_default("/dev/ttyTEST")
    config.session.calibration_seconds = 60.0
    config.session.scoring_interval = 60.0
    config.session.render_interval = 60.0
    return config


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def busy_transport() -> FakeTransport:
    return FakeTransport(fail_open=TransportOpenError("device busy"))

