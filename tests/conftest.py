"""Pytest fixtures for tests."""

from collections.abc import Sequence

import pytest

from wnpbridge.bridge import ColorStateBridge
from wnpbridge.exceptions import TransportError
from wnpbridge.responders import BRIGHTNESS, HUE, ON, SATURATION
from wnpbridge.telemetry import MetricsRecorder

RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
BLACK = 0x00000000


class FakeStrip:
    """In-memory StripClient that records every call."""

    def __init__(self, words: Sequence[int]):
        self.words = list(words)
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def fetch_states(self) -> list[int]:
        self._record("fetch_states")
        return list(self.words)

    def clear(self) -> None:
        self._record("clear")
        self.words = [BLACK] * len(self.words)

    def push_states(self, words: Sequence[int]) -> None:
        self._record("push_states", list(words))
        self.words = list(words)

    @property
    def pushes(self) -> list[list[int]]:
        return [call[1] for call in self.calls if call[0] == "push_states"]

    @property
    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise TransportError("Could not connect to the LED strip", operation=name)


class FakeCharacteristics:
    """Dict-backed LightCharacteristics."""

    def __init__(self, **values):
        self.values = {HUE: 0.0, SATURATION: 0.0, BRIGHTNESS: 100, ON: False}
        self.values.update(values)
        self.writes: list[tuple[str, object]] = []

    def get_value(self, name: str):
        return self.values[name]

    def set_value(self, name: str, value) -> None:
        self.writes.append((name, value))
        self.values[name] = value


class SleepRecorder:
    """Stand-in for time.sleep that only records the requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def off_strip():
    """Two dark pixels."""
    return FakeStrip([BLACK, BLACK])


@pytest.fixture
def green_strip():
    """Three green pixels."""
    return FakeStrip([GREEN, GREEN, GREEN])


@pytest.fixture
def off_bridge(off_strip):
    """Initialized bridge over a dark strip."""
    bridge = ColorStateBridge(off_strip)
    bridge.initialize()
    off_strip.calls.clear()
    return bridge


@pytest.fixture
def green_bridge(green_strip):
    """Initialized bridge over a lit strip."""
    bridge = ColorStateBridge(green_strip)
    bridge.initialize()
    green_strip.calls.clear()
    return bridge


@pytest.fixture
def characteristics():
    return FakeCharacteristics()


@pytest.fixture
def recorder():
    return MetricsRecorder()


@pytest.fixture
def sleep():
    return SleepRecorder()
