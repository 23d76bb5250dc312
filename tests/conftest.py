"""Shared fixtures for Base64Clip tests."""

import sys
from pathlib import Path

import pytest

# Add repo root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from clipboard import MemoryClipboard
from notifications import FadeTiming, NotificationQueue


class FakeClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start_ms: int = 100_000):
        self.ms = start_ms

    def __call__(self) -> float:
        return self.ms / 1000.0

    def advance_ms(self, ms: int):
        self.ms += ms


class FakeScheduler:
    """Collects scheduler(delay_ms, callback) calls; fires them on demand."""

    def __init__(self, clock: FakeClock):
        self.clock   = clock
        self.pending = []

    def __call__(self, delay_ms, callback):
        self.pending.append((self.clock.ms + delay_ms, callback))

    def run_due(self) -> int:
        due = [p for p in self.pending if p[0] <= self.clock.ms]
        self.pending = [p for p in self.pending if p[0] > self.clock.ms]
        for _, callback in sorted(due, key=lambda p: p[0]):
            callback()
        return len(due)


class RecordingHistory:
    def __init__(self):
        self.entries = []

    def log(self, message, tag="info", operation="", source="", result=""):
        self.entries.append({"message": message, "tag": tag, "operation": operation,
                             "source": source, "result": result})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return FakeScheduler(clock)


@pytest.fixture
def notification_queue(clock, scheduler):
    return NotificationQueue(timing=FadeTiming(), clock=clock, scheduler=scheduler)


@pytest.fixture
def memory_clipboard():
    return MemoryClipboard()


@pytest.fixture
def history():
    return RecordingHistory()
