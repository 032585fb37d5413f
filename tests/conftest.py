from __future__ import annotations

import curses
import os
from typing import Any

import pytest

from tcal.core.base import Viewport
from tcal.core.calendar_view import CalendarView


class FakeWindow:
    """Stand-in for a curses window: records writes, replays queued keys."""

    def __init__(self, height: int = 24, width: int = 80, keys: list[int] | None = None) -> None:
        self.height = height
        self.width = width
        self.keys: list[int] = list(keys or [])
        self.writes: list[tuple[int, int, str, int]] = []
        self.timeouts: list[int] = []
        self.refreshes = 0
        self.erases = 0
        self.fail_refresh = False
        self.fail_getch = False

    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        self.writes.append((y, x, text, attr))

    def erase(self) -> None:
        self.erases += 1
        self.writes.clear()

    def border(self) -> None:
        pass

    def refresh(self) -> None:
        if self.fail_refresh:
            raise curses.error('refresh() returned ERR')
        self.refreshes += 1

    def timeout(self, delay: int) -> None:
        self.timeouts.append(delay)

    def getch(self) -> int:
        if self.fail_getch:
            raise curses.error('getch() returned ERR')
        if not self.keys:
            return -1
        return self.keys.pop(0)

    def text_at(self, y: int, x: int) -> str | None:
        for wy, wx, text, _attr in self.writes:
            if (wy, wx) == (y, x):
                return text
        return None


class FakeDisplay:
    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.size = Viewport(height=height, width=width)
        self.views: list[CalendarView] = []
        self.error: Exception | None = None

    def viewport(self) -> Viewport:
        return self.size

    def draw(self, view: CalendarView) -> None:
        if self.error is not None:
            raise self.error
        self.views.append(view)


class FakeInput:
    """Replays raw events; None stands for an idle timeout."""

    def __init__(self, events: list[Any]) -> None:
        self.events = list(events)
        self.timeouts: list[float] = []

    def poll(self, timeout: float) -> int | None:
        self.timeouts.append(timeout)
        event = self.events.pop(0)
        if isinstance(event, Exception):
            raise event
        return event


@pytest.fixture(autouse=True)
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    # python-dotenv writes straight into os.environ
    monkeypatch.setattr(os, 'environ', dict(os.environ))
    for name in ('TCAL_QUIT_KEY', 'TCAL_IDLE_TIMEOUT'):
        os.environ.pop(name, None)
