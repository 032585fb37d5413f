from __future__ import annotations
import datetime
import typing

from tcal.core.base import Viewport
from tcal.core.calendar_view import CalendarView, render_calendar
from tcal.core.navigation import Command, ControlFlow, NavigationState

DEFAULT_IDLE_TIMEOUT: float = 60.0


class DisplaySurface(typing.Protocol):
    def viewport(self) -> Viewport: ...

    def draw(self, view: CalendarView) -> None: ...


class InputStream(typing.Protocol):
    def poll(self, timeout: float) -> int | None: ...


class CommandTranslator(typing.Protocol):
    def translate(self, key: int | None) -> Command: ...


def redraw(
        state: NavigationState,
        display: DisplaySurface,
        today: typing.Callable[[], datetime.date]
) -> None:
    # "today" is read on every render so the highlight moves at midnight
    view = render_calendar(state.selected, today(), display.viewport())
    display.draw(view)


def run_calendar(
        state: NavigationState,
        input_stream: InputStream,
        display: DisplaySurface,
        key_map: CommandTranslator,
        today: typing.Callable[[], datetime.date] = datetime.date.today,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT
) -> None:
    """Draw the calendar and process input until a quit command arrives.

    DisplayError, InputError and DateArithmeticError propagate to the caller,
    which is responsible for restoring the terminal.
    """
    redraw(state, display, today)

    while True:
        key = input_stream.poll(idle_timeout)
        flow = state.apply(key_map.translate(key))

        if flow == ControlFlow.QUIT:
            return
        if flow == ControlFlow.RENDER:
            redraw(state, display, today)
