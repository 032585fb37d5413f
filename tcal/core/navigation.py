from __future__ import annotations
from enum import Enum
import datetime

from tcal.core.base import DateArithmeticError


class Command(Enum):
    QUIT = 'quit'
    MOVE_DAY_FORWARD = 'move_day_forward'
    MOVE_DAY_BACKWARD = 'move_day_backward'
    MOVE_WEEK_FORWARD = 'move_week_forward'
    MOVE_WEEK_BACKWARD = 'move_week_backward'
    VIEWPORT_CHANGED = 'viewport_changed'
    IDLE = 'idle'
    NONE = 'none'  # Unrecognized input


class ControlFlow(Enum):
    CONTINUE = 'continue'
    RENDER = 'render'
    QUIT = 'quit'


# Days to shift the selected date by
MOVES: dict[Command, int] = {
    Command.MOVE_DAY_FORWARD: 1,
    Command.MOVE_DAY_BACKWARD: -1,
    Command.MOVE_WEEK_FORWARD: 7,
    Command.MOVE_WEEK_BACKWARD: -7,
}


def shift_days(day: datetime.date, days: int) -> datetime.date:
    """Return ``day`` moved by ``days``, raising DateArithmeticError outside date.min..date.max"""
    try:
        return day + datetime.timedelta(days=days)
    except OverflowError as e:
        raise DateArithmeticError(f'Cannot move {day.isoformat()} by {days} day(s): {e}') from e


class NavigationState:
    def __init__(self, selected: datetime.date) -> None:
        self.selected: datetime.date = selected

    @classmethod
    def starting_today(cls) -> NavigationState:
        return cls(datetime.date.today())

    def apply(self, command: Command) -> ControlFlow:
        if command == Command.QUIT:
            return ControlFlow.QUIT

        if command in MOVES:
            self.selected = shift_days(self.selected, MOVES[command])
            return ControlFlow.RENDER

        if command in (Command.VIEWPORT_CHANGED, Command.IDLE):
            # Idle re-renders so the today highlight follows the clock past midnight
            return ControlFlow.RENDER

        return ControlFlow.CONTINUE
