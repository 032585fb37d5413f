"""Month grid layout: which weeks to show, how each day is styled and how the grid fits the terminal."""
from __future__ import annotations
from enum import Enum
import datetime
import typing

from tcal.core.base import Viewport
from tcal.core.navigation import shift_days

FULL_WEEKDAY_NAMES: list[str] = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
SHORT_WEEKDAY_NAMES: list[str] = [name[:3] for name in FULL_WEEKDAY_NAMES]

FULL_NAMES_MIN_WIDTH: int = 80
NO_SPACING_MIN_WIDTH: int = 40
RESERVED_ROWS: int = 4  # Top border, header, header margin, bottom border
MAX_WEEKS: int = 6
BORDER_COLUMNS: int = 2
DAYS_PER_WEEK: int = 7


class BaseStyle(Enum):
    IN_MONTH_WEEKEND = 'in_month_weekend'
    IN_MONTH_WEEKDAY = 'in_month_weekday'
    OUT_OF_MONTH_WEEKEND = 'out_of_month_weekend'
    OUT_OF_MONTH_WEEKDAY = 'out_of_month_weekday'


class Highlight(Enum):
    TODAY_SELECTED = 'today_selected'
    TODAY = 'today'
    SELECTED = 'selected'
    NONE = 'none'


BASE_STYLES: dict[tuple[bool, bool], BaseStyle] = {
    # (in month, weekend)
    (True, True): BaseStyle.IN_MONTH_WEEKEND,
    (True, False): BaseStyle.IN_MONTH_WEEKDAY,
    (False, True): BaseStyle.OUT_OF_MONTH_WEEKEND,
    (False, False): BaseStyle.OUT_OF_MONTH_WEEKDAY,
}

HIGHLIGHTS: dict[tuple[bool, bool], Highlight] = {
    # (today, selected)
    (True, True): Highlight.TODAY_SELECTED,
    (True, False): Highlight.TODAY,
    (False, True): Highlight.SELECTED,
    (False, False): Highlight.NONE,
}


class Cell:
    def __init__(self, day: datetime.date, base_style: BaseStyle, highlight: Highlight) -> None:
        self.day: datetime.date = day
        self.label: str = str(day.day)
        self.base_style: BaseStyle = base_style
        self.highlight: Highlight = highlight

    def __repr__(self) -> str:
        return f'Cell({self.day.isoformat()}, {self.base_style.name}, {self.highlight.name})'

    @property
    def is_today(self) -> bool:
        return self.highlight in (Highlight.TODAY, Highlight.TODAY_SELECTED)

    @property
    def is_selected(self) -> bool:
        return self.highlight in (Highlight.SELECTED, Highlight.TODAY_SELECTED)


Week = list[Cell]


class CalendarView:
    def __init__(
            self,
            title: str,
            header: list[str],
            weeks: list[Week],
            row_height: int,
            column_spacing: int,
            column_widths: list[int],
            viewport: Viewport
    ) -> None:
        self.title = title
        self.header = header
        self.weeks = weeks
        self.row_height = row_height
        self.column_spacing = column_spacing
        self.column_widths = column_widths
        self.viewport = viewport

    def cells(self) -> typing.Iterator[Cell]:
        for week in self.weeks:
            yield from week


def week_start(day: datetime.date) -> datetime.date:
    """Monday of the week containing ``day``"""
    return shift_days(day, -day.weekday())


def month_weeks(selected: datetime.date) -> list[list[datetime.date]]:
    """Whole Monday-start weeks covering the month of ``selected``, spillover days included"""
    month = (selected.year, selected.month)
    monday = week_start(selected.replace(day=1))
    weeks: list[list[datetime.date]] = []

    while True:
        sunday = shift_days(monday, DAYS_PER_WEEK - 1)
        if (monday.year, monday.month) != month and (sunday.year, sunday.month) != month:
            break
        weeks.append([shift_days(monday, i) for i in range(DAYS_PER_WEEK)])
        monday = shift_days(sunday, 1)

    return weeks


def style_cell(day: datetime.date, selected: datetime.date, today: datetime.date) -> Cell:
    in_month = (day.year, day.month) == (selected.year, selected.month)
    weekend = day.weekday() >= 5
    return Cell(
        day,
        BASE_STYLES[(in_month, weekend)],
        HIGHLIGHTS[(day == today, day == selected)]
    )


def row_height(viewport: Viewport) -> int:
    return max(1, (viewport.height - RESERVED_ROWS) // MAX_WEEKS)


def weekday_header(viewport: Viewport) -> list[str]:
    if viewport.width >= FULL_NAMES_MIN_WIDTH:
        return list(FULL_WEEKDAY_NAMES)
    return list(SHORT_WEEKDAY_NAMES)


def column_spacing(viewport: Viewport) -> int:
    return 1 if viewport.width < NO_SPACING_MIN_WIDTH else 0


def column_widths(viewport: Viewport, spacing: int) -> list[int]:
    available = max(0, viewport.width - BORDER_COLUMNS - spacing * (DAYS_PER_WEEK - 1))
    width, remainder = divmod(available, DAYS_PER_WEEK)
    return [width + 1 if i < remainder else width for i in range(DAYS_PER_WEEK)]


def title(selected: datetime.date) -> str:
    return f'{selected.month:02}/{selected.year}'


def render_calendar(selected: datetime.date, today: datetime.date, viewport: Viewport) -> CalendarView:
    weeks: list[Week] = [
        [style_cell(day, selected, today) for day in week]
        for week in month_weeks(selected)
    ]
    spacing = column_spacing(viewport)

    return CalendarView(
        title=title(selected),
        header=weekday_header(viewport),
        weeks=weeks,
        row_height=row_height(viewport),
        column_spacing=spacing,
        column_widths=column_widths(viewport, spacing),
        viewport=viewport
    )
