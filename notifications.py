#!/usr/bin/env python3
"""
notifications.py - Transient status messages for Base64Clip.

A notification fades in, holds, fades out and is then dropped from the
queue. Only state and timestamps live here; the window decides how to draw
a given opacity.

Lifecycle (per notification, driven by elapsed time):

    CREATED   fade-in   opacity 0 -> 1
    VISIBLE   hold      opacity 1
    FADING    fade-out  opacity 1 -> 0
    REMOVED   terminal, no longer in the queue
"""

import time
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    INFO = "info"
    ERROR = "error"


class State(Enum):
    CREATED = "created"
    VISIBLE = "visible"
    FADING = "fading"
    REMOVED = "removed"


@dataclass(frozen=True)
class FadeTiming:
    fade_in_ms: int = 500
    hold_ms: int = 5000
    fade_out_ms: int = 500

    @property
    def total_ms(self) -> int:
        return self.fade_in_ms + self.hold_ms + self.fade_out_ms


@dataclass(eq=False)
class Notification:
    message: str
    severity: Severity
    created_at: float
    timing: FadeTiming = field(default_factory=FadeTiming)
    removed: bool = False

    def elapsed_ms(self, now: float) -> float:
        return max(0.0, (now - self.created_at) * 1000.0)

    def state(self, now: float) -> State:
        if self.removed:
            return State.REMOVED
        elapsed = self.elapsed_ms(now)
        t = self.timing
        if elapsed < t.fade_in_ms:
            return State.CREATED
        if elapsed < t.fade_in_ms + t.hold_ms:
            return State.VISIBLE
        if elapsed < t.total_ms:
            return State.FADING
        return State.REMOVED

    def opacity(self, now: float) -> float:
        """Opacity in [0, 1] at time now."""
        state = self.state(now)
        elapsed = self.elapsed_ms(now)
        t = self.timing
        if state is State.CREATED:
            return elapsed / t.fade_in_ms
        if state is State.VISIBLE:
            return 1.0
        if state is State.FADING:
            remaining = t.total_ms - elapsed
            return remaining / t.fade_out_ms
        return 0.0


class NotificationQueue:
    """
    Ordered list of live notifications, newest first.

    scheduler, when given, is called as scheduler(delay_ms, callback) to
    arrange the removal of each notification; tk.Tk.after fits. Without
    one, the host calls prune() from its own loop.
    """

    def __init__(self, timing: FadeTiming = None, clock=time.monotonic,
                 scheduler=None):
        self.timing     = timing or FadeTiming()
        self._clock     = clock
        self._scheduler = scheduler
        self._items: list = []
        self._listeners: list = []

    def push(self, severity: Severity, message: str) -> Notification:
        note = Notification(
            message=str(message),
            severity=severity,
            created_at=self._clock(),
            timing=self.timing,
        )
        self._items.insert(0, note)
        if self._scheduler is not None:
            self._scheduler(self.timing.total_ms, lambda: self._expire(note))
        self._changed()
        return note

    def info(self, message: str) -> Notification:
        return self.push(Severity.INFO, message)

    def error(self, message: str) -> Notification:
        return self.push(Severity.ERROR, message)

    def visible(self) -> list:
        return list(self._items)

    def now(self) -> float:
        return self._clock()

    def prune(self, now: float = None) -> int:
        """Drop every notification whose schedule has run out. Returns the count."""
        now = self._clock() if now is None else now
        expired = [n for n in self._items if n.state(now) is State.REMOVED]
        for note in expired:
            self._drop(note)
        if expired:
            self._changed()
        return len(expired)

    def subscribe(self, callback):
        self._listeners.append(callback)

    def _expire(self, note: Notification):
        if note in self._items:
            self._drop(note)
            self._changed()

    def _drop(self, note: Notification):
        self._items.remove(note)
        note.removed = True

    def _changed(self):
        for callback in self._listeners:
            callback(self)

    def __len__(self):
        return len(self._items)
