from __future__ import annotations
import curses
import typing

from tcal.core.base import (
    BaseConfig,
    CursesBold,
    CursesDim,
    CursesItalic,
    CursesKeys,
    CursesReverse,
    CursesWindowType,
    DisplayError,
    InputError,
    Viewport,
    safe_addstr
)
from tcal.core.calendar_view import BaseStyle, CalendarView, Cell, Highlight
from tcal.core.navigation import Command

# Palette keys, resolved to curses color pair attributes once colors are initialised
FOREGROUND = 'foreground'
HIGHLIGHT = 'highlight'
WARNING = 'warning'
SUCCESS_BACKGROUND = 'success_background'
INFO_BACKGROUND = 'info_background'

Palette = dict[str, int]

# style -> (palette key or None for the default color, extra attributes)
BASE_ATTRIBUTES: dict[BaseStyle, tuple[str | None, int]] = {
    BaseStyle.IN_MONTH_WEEKEND: (WARNING, CursesBold),
    BaseStyle.IN_MONTH_WEEKDAY: (HIGHLIGHT, 0),
    BaseStyle.OUT_OF_MONTH_WEEKEND: (WARNING, CursesDim | CursesItalic),
    BaseStyle.OUT_OF_MONTH_WEEKDAY: (None, CursesItalic),
}

HIGHLIGHT_ATTRIBUTES: dict[Highlight, tuple[str | None, int]] = {
    Highlight.TODAY_SELECTED: (SUCCESS_BACKGROUND, CursesBold),
    Highlight.TODAY: (INFO_BACKGROUND, CursesBold),
    Highlight.SELECTED: (None, CursesReverse | CursesBold),
    Highlight.NONE: (None, 0),
}


def build_palette(base_config: BaseConfig) -> Palette:
    return {
        FOREGROUND: curses.color_pair(base_config.FOREGROUND_PAIR_NUMBER),
        HIGHLIGHT: curses.color_pair(base_config.HIGHLIGHT_PAIR_NUMBER),
        WARNING: curses.color_pair(base_config.WARNING_PAIR_NUMBER),
        SUCCESS_BACKGROUND: curses.color_pair(base_config.SUCCESS_BACKGROUND_PAIR_NUMBER),
        INFO_BACKGROUND: curses.color_pair(base_config.INFO_BACKGROUND_PAIR_NUMBER),
    }


def cell_attributes(cell: Cell, palette: Palette) -> int:
    """Curses attributes for a cell: the highlight tier is layered on the base tier, its color winning"""
    base_color, base_extra = BASE_ATTRIBUTES[cell.base_style]
    highlight_color, highlight_extra = HIGHLIGHT_ATTRIBUTES[cell.highlight]

    color = highlight_color if highlight_color is not None else base_color
    attributes = base_extra | highlight_extra
    if color is not None:
        attributes |= palette[color]
    return attributes


class KeyMap:
    def __init__(self, quit_key: str = 'q') -> None:
        self.bindings: dict[int, Command] = {
            int(CursesKeys.RIGHT): Command.MOVE_DAY_FORWARD,
            int(CursesKeys.LEFT): Command.MOVE_DAY_BACKWARD,
            int(CursesKeys.DOWN): Command.MOVE_WEEK_FORWARD,
            int(CursesKeys.UP): Command.MOVE_WEEK_BACKWARD,
            int(CursesKeys.RESIZE): Command.VIEWPORT_CHANGED,
            int(CursesKeys.CTRL_C): Command.QUIT,
            ord(quit_key): Command.QUIT,
        }

    @classmethod
    def from_config(cls, base_config: BaseConfig) -> KeyMap:
        return cls(quit_key=base_config.quit_key)

    def translate(self, key: int | None) -> Command:
        if key is None:
            return Command.IDLE
        return self.bindings.get(key, Command.NONE)


class CursesInput:
    def __init__(self, stdscr: CursesWindowType) -> None:
        self.stdscr = stdscr

    def poll(self, timeout: float) -> int | None:
        """Wait up to ``timeout`` seconds for a key, None if nothing arrived"""
        self.stdscr.timeout(max(0, int(timeout * 1000)))
        try:
            key: int = self.stdscr.getch()
        except curses.error as e:
            raise InputError(f'Reading from the terminal failed: {e}') from e
        if key == -1:
            return None
        return key


class CursesDisplay:
    def __init__(self, stdscr: typing.Any, palette: Palette) -> None:
        self.stdscr = stdscr
        self.palette = palette

    def viewport(self) -> Viewport:
        height, width = self.stdscr.getmaxyx()
        return Viewport(height=height, width=width)

    def draw(self, view: CalendarView) -> None:
        win = self.stdscr
        height, width = win.getmaxyx()
        last_inner_row = height - 2

        try:
            win.erase()  # Instead of clear(), prevents flickering
            win.border()
        except curses.error as e:
            raise DisplayError(f'Drawing the calendar frame failed: {e}') from e

        safe_addstr(win, 0, 2, view.title[:max(0, width - 4)])

        x = 1
        for name, column_width in zip(view.header, view.column_widths):
            if last_inner_row >= 1:
                safe_addstr(win, 1, x, name[:column_width], CursesBold)
            x += column_width + view.column_spacing

        # Row 2 is the header's bottom margin
        y = 3
        for week in view.weeks:
            x = 1
            for cell, column_width in zip(week, view.column_widths):
                self._draw_cell(cell, y, x, column_width, view.row_height, last_inner_row)
                x += column_width + view.column_spacing
            y += view.row_height

        try:
            win.refresh()
        except curses.error as e:
            raise DisplayError(f'Refreshing the terminal failed: {e}') from e

    def _draw_cell(self, cell: Cell, y: int, x: int, column_width: int, row_height: int, last_row: int) -> None:
        if column_width <= 0:
            return
        attributes = cell_attributes(cell, self.palette)
        for line in range(row_height):
            if y + line > last_row:
                break
            text = cell.label if line == 0 else ''
            safe_addstr(self.stdscr, y + line, x, text[:column_width].ljust(column_width), attributes)
