from __future__ import annotations

import datetime

import pytest

from tcal.core.base import DateArithmeticError
from tcal.core.navigation import Command, ControlFlow, NavigationState, shift_days


def test_day_forward_from_leap_day_enters_march() -> None:
    state = NavigationState(datetime.date(2024, 2, 29))

    assert state.apply(Command.MOVE_DAY_FORWARD) == ControlFlow.RENDER
    assert state.selected == datetime.date(2024, 3, 1)


def test_week_forward_crosses_month_end() -> None:
    state = NavigationState(datetime.date(2024, 1, 31))

    state.apply(Command.MOVE_WEEK_FORWARD)

    assert state.selected == datetime.date(2024, 2, 7)


def test_week_backward_and_day_backward() -> None:
    state = NavigationState(datetime.date(2024, 3, 1))

    state.apply(Command.MOVE_DAY_BACKWARD)
    assert state.selected == datetime.date(2024, 2, 29)

    state.apply(Command.MOVE_WEEK_BACKWARD)
    assert state.selected == datetime.date(2024, 2, 22)


@pytest.mark.parametrize(
    'start',
    [
        datetime.date(2023, 12, 31),
        datetime.date(2024, 1, 1),
        datetime.date(2024, 2, 28),
        datetime.date(2024, 2, 29),
        datetime.date(2100, 2, 28),
        datetime.date(2000, 3, 1),
        datetime.date(1, 1, 8),
    ],
)
@pytest.mark.parametrize(
    ('forward', 'backward'),
    [
        (Command.MOVE_DAY_FORWARD, Command.MOVE_DAY_BACKWARD),
        (Command.MOVE_DAY_BACKWARD, Command.MOVE_DAY_FORWARD),
        (Command.MOVE_WEEK_FORWARD, Command.MOVE_WEEK_BACKWARD),
        (Command.MOVE_WEEK_BACKWARD, Command.MOVE_WEEK_FORWARD),
    ],
)
def test_opposite_moves_return_to_start(start: datetime.date, forward: Command, backward: Command) -> None:
    state = NavigationState(start)

    state.apply(forward)
    state.apply(backward)

    assert state.selected == start


def test_moving_past_date_max_fails_without_changing_state() -> None:
    state = NavigationState(datetime.date.max)

    with pytest.raises(DateArithmeticError):
        state.apply(Command.MOVE_DAY_FORWARD)

    assert state.selected == datetime.date.max


def test_week_back_from_near_date_min_fails() -> None:
    state = NavigationState(datetime.date(1, 1, 3))

    with pytest.raises(DateArithmeticError):
        state.apply(Command.MOVE_WEEK_BACKWARD)

    assert state.selected == datetime.date(1, 1, 3)


def test_quit_ends_the_loop_and_keeps_state() -> None:
    state = NavigationState(datetime.date(2024, 5, 5))

    assert state.apply(Command.QUIT) == ControlFlow.QUIT
    assert state.selected == datetime.date(2024, 5, 5)


@pytest.mark.parametrize('command', [Command.IDLE, Command.VIEWPORT_CHANGED])
def test_idle_and_resize_request_render_without_moving(command: Command) -> None:
    state = NavigationState(datetime.date(2024, 5, 5))

    assert state.apply(command) == ControlFlow.RENDER
    assert state.selected == datetime.date(2024, 5, 5)


def test_unrecognized_input_is_a_no_op() -> None:
    state = NavigationState(datetime.date(2024, 5, 5))

    assert state.apply(Command.NONE) == ControlFlow.CONTINUE
    assert state.selected == datetime.date(2024, 5, 5)


def test_starting_today_uses_local_date() -> None:
    before = datetime.date.today()
    state = NavigationState.starting_today()
    after = datetime.date.today()

    assert before <= state.selected <= after


def test_shift_days_error_names_the_date() -> None:
    with pytest.raises(DateArithmeticError, match='9999-12-31'):
        shift_days(datetime.date.max, 7)
