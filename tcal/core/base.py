from __future__ import annotations  # allows forward references in type hints
from enum import Enum, IntEnum
from pathlib import Path
import yaml
from dotenv import load_dotenv
import os
import math
import curses
import _curses
import typing


class Viewport:
    def __init__(self, height: int, width: int) -> None:
        self.height: int = height
        self.width: int = width

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Viewport):
            return NotImplemented
        return (self.height, self.width) == (other.height, other.width)

    def __repr__(self) -> str:
        return f'Viewport(height={self.height}, width={self.width})'


class CalendarError(Exception):
    """Base class for errors that end the calendar loop"""


class DisplayError(CalendarError):
    """Raised when the display surface fails to write or flush"""


class InputError(CalendarError):
    """Raised when the input stream fails to read"""


class DateArithmeticError(CalendarError):
    """Raised when a date shift leaves the representable date range"""


class YAMLParseException(Exception):
    """Raised to signal that there was an error parsing a YAML file"""


class ConfigScanFoundError(Exception):
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages
        super().__init__(log_messages)


class LogLevels(Enum):
    UNKNOWN = (0, '? Unknown')
    INFO = (1, 'ℹ️ Info')
    WARNING = (3, '⚠️ Warnings')
    ERROR = (4, '⚠️ Errors')

    @property
    def key(self) -> int:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @classmethod
    def from_key(cls, key: int) -> LogLevels:
        """Return the LogLevels member that matches the key"""
        for level in cls:
            if level.key == key:
                return level
        return LogLevels.UNKNOWN


class LogMessage:
    def __init__(self, message: str, level: int) -> None:
        self.message: str = message
        self.level: int = level

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessage):
            return NotImplemented
        return (self.message, self.level) == (other.message, other.level)

    def is_error(self) -> bool:
        return self.level == LogLevels.ERROR.key


class LogMessages:
    def __init__(self, log_messages: list[LogMessage] | None = None) -> None:
        if log_messages is None:
            self.log_messages: list[LogMessage] = []
        else:
            self.log_messages = log_messages

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessages):
            return NotImplemented
        return self.log_messages == other.log_messages

    def add_log_message(self, message: LogMessage) -> None:
        self.log_messages.append(message)

    def print_log_messages(self, heading: str) -> None:
        if not self.log_messages:
            return

        print(heading, end='')
        log_messages_by_level: dict[int, list[LogMessage]] = {}
        for message in self.log_messages:
            log_messages_by_level.setdefault(message.level, []).append(message)

        for level in sorted(log_messages_by_level.keys()):
            print(f'\n{LogLevels.from_key(level).label}:')
            for message in log_messages_by_level[level]:
                print(message)

    def contains_error(self) -> bool:
        return any(message.is_error() for message in self.log_messages)

    def is_empty(self) -> bool:
        return not self.log_messages


class RGBColor:
    def __init__(self, r: int, g: int, b: int) -> None:
        self.r = r
        self.g = g
        self.b = b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RGBColor):
            return NotImplemented
        return (self.r, self.g, self.b) == (other.r, other.g, other.b)

    def rgb_to_0_1000(self) -> tuple[int, int, int]:
        return (
            round(self.r * 1000 / 255),
            round(self.g * 1000 / 255),
            round(self.b * 1000 / 255),
        )

    @staticmethod
    def add_rgb_color_from_dict(color: dict[str, typing.Any]) -> RGBColor:
        # Make sure every value is an int in 0..255 (else raise an error)
        values: list[int] = [int(color[channel]) for channel in ('r', 'g', 'b')]
        for channel, value in zip(('r', 'g', 'b'), values):
            if not 0 <= value <= 255:
                raise ValueError(f'{channel}={value} not in 0..255')
        return RGBColor(r=values[0], g=values[1], b=values[2])


class BaseStandardFallBackConfig:
    def __init__(self) -> None:
        self.foreground_color: RGBColor = RGBColor(r=227, g=236, b=252)
        self.highlight_color: RGBColor = RGBColor(r=255, g=255, b=95)
        self.warning_color: RGBColor = RGBColor(r=255, g=95, b=95)
        self.success_color: RGBColor = RGBColor(r=0, g=175, b=0)
        self.info_color: RGBColor = RGBColor(r=95, g=175, b=255)

        self.use_standard_terminal_background: bool = True

        self.quit_key: str = 'q'
        self.idle_timeout: float = 60.0


class BaseConfig:
    COLOR_FIELDS: tuple[str, ...] = (
        'foreground_color', 'highlight_color', 'warning_color', 'success_color', 'info_color'
    )
    MAX_IDLE_TIMEOUT: int = (2 ** 31 - 1) // 1000

    def __init__(
            self,
            log_messages: LogMessages,
            use_standard_terminal_background: bool | None = None,
            foreground_color: dict[str, typing.Any] | None = None,
            highlight_color: dict[str, typing.Any] | None = None,
            warning_color: dict[str, typing.Any] | None = None,
            success_color: dict[str, typing.Any] | None = None,
            info_color: dict[str, typing.Any] | None = None,
            quit_key: str | None = None,
            idle_timeout: int | float | None = None,
            warn_missing: bool = True,
            **kwargs: typing.Any
    ) -> None:
        fallback: BaseStandardFallBackConfig = BaseStandardFallBackConfig()

        self.foreground_color: RGBColor = fallback.foreground_color
        self.highlight_color: RGBColor = fallback.highlight_color
        self.warning_color: RGBColor = fallback.warning_color
        self.success_color: RGBColor = fallback.success_color
        self.info_color: RGBColor = fallback.info_color
        self.use_standard_terminal_background: bool = fallback.use_standard_terminal_background
        self.quit_key: str = fallback.quit_key
        self.idle_timeout: float = fallback.idle_timeout

        colors: dict[str, dict[str, typing.Any] | None] = {
            'foreground_color': foreground_color,
            'highlight_color': highlight_color,
            'warning_color': warning_color,
            'success_color': success_color,
            'info_color': info_color,
        }

        for field_name in self.COLOR_FIELDS:
            value = colors[field_name]
            if value is None:
                if warn_missing:
                    log_messages.add_log_message(LogMessage(
                        f'Configuration for {field_name} is missing (base.yaml,'
                        f' falling back to standard config)',
                        LogLevels.WARNING.key
                    ))
                continue
            try:
                setattr(self, field_name, RGBColor.add_rgb_color_from_dict(value))
            except KeyError as e:
                log_messages.add_log_message(LogMessage(
                    f'Configuration for {field_name} is missing for {e}',
                    LogLevels.ERROR.key
                ))
            except (TypeError, ValueError) as e:
                log_messages.add_log_message(LogMessage(
                    f'Configuration for {field_name} is invalid ({e})',
                    LogLevels.ERROR.key
                ))

        if use_standard_terminal_background is not None:
            if not isinstance(use_standard_terminal_background, bool):
                log_messages.add_log_message(LogMessage(
                    'Configuration for use_standard_terminal_background is invalid (not True / False)',
                    LogLevels.ERROR.key
                ))
            else:
                self.use_standard_terminal_background = use_standard_terminal_background
        elif warn_missing:
            log_messages.add_log_message(LogMessage(
                'Configuration for use_standard_terminal_background is missing (base.yaml,'
                ' falling back to standard config)',
                LogLevels.WARNING.key
            ))

        if quit_key is not None:
            if not isinstance(quit_key, str) or len(quit_key) != 1:
                log_messages.add_log_message(LogMessage(
                    'Configuration for quit_key value wrong length (not 1)',
                    LogLevels.ERROR.key
                ))
            elif not (quit_key.isalpha() or quit_key.isdigit()):
                log_messages.add_log_message(LogMessage(
                    'Configuration for quit_key value not alphabetic or numeric',
                    LogLevels.ERROR.key
                ))
            else:
                self.quit_key = quit_key
        elif warn_missing:
            log_messages.add_log_message(LogMessage(
                'Configuration for quit_key is missing (base.yaml,'
                ' falling back to standard config)',
                LogLevels.WARNING.key
            ))

        if idle_timeout is not None:
            # bool is an int subclass
            if isinstance(idle_timeout, bool) or not isinstance(idle_timeout, (int, float)) or idle_timeout <= 0:
                log_messages.add_log_message(LogMessage(
                    'Configuration for idle_timeout is invalid (not a positive number of seconds)',
                    LogLevels.ERROR.key
                ))
            # curses takes the timeout as an int of milliseconds
            elif idle_timeout > self.MAX_IDLE_TIMEOUT or not math.isfinite(idle_timeout):
                log_messages.add_log_message(LogMessage(
                    f'Configuration for idle_timeout is invalid (not at most {self.MAX_IDLE_TIMEOUT} seconds)',
                    LogLevels.ERROR.key
                ))
            else:
                self.idle_timeout = float(idle_timeout)
        elif warn_missing:
            log_messages.add_log_message(LogMessage(
                'Configuration for idle_timeout is missing (base.yaml,'
                ' falling back to standard config)',
                LogLevels.WARNING.key
            ))

        for key in kwargs:
            log_messages.add_log_message(LogMessage(
                f'Configuration for key "{key}" is not expected (base.yaml)',
                LogLevels.WARNING.key
            ))

        if self.use_standard_terminal_background:
            self.BACKGROUND_NUMBER: int = -1
        else:
            self.BACKGROUND_NUMBER = curses.COLOR_BLACK

        self.FOREGROUND_PAIR_NUMBER: int = 1
        self.HIGHLIGHT_PAIR_NUMBER: int = 2
        self.WARNING_PAIR_NUMBER: int = 3
        self.SUCCESS_BACKGROUND_PAIR_NUMBER: int = 4
        self.INFO_BACKGROUND_PAIR_NUMBER: int = 5

        # palette slot -> (pair number, color, text on top of it as background?)
        self.base_colors: dict[int, tuple[int, RGBColor | int, bool]] = {
            15: (self.FOREGROUND_PAIR_NUMBER, self.foreground_color, False),
            11: (self.HIGHLIGHT_PAIR_NUMBER, self.highlight_color, False),
            9: (self.WARNING_PAIR_NUMBER, self.warning_color, False),
            10: (self.SUCCESS_BACKGROUND_PAIR_NUMBER, self.success_color, True),
            12: (self.INFO_BACKGROUND_PAIR_NUMBER, self.info_color, True),
        }


class ConfigLoader:
    ENV_PREFIX: str = 'TCAL_'

    def __init__(self, config_dir: Path | None = None) -> None:
        self.CONFIG_DIR = config_dir if config_dir is not None else Path.home() / '.config' / 'tcal'
        load_dotenv(self.CONFIG_DIR / 'tcal.env')

    def reload_env(self) -> None:
        load_dotenv(self.CONFIG_DIR / 'tcal.env', override=True)

    def get_env(self, name: str, default: str | None = None) -> str | None:
        return os.getenv(f'{self.ENV_PREFIX}{name}', default)

    @staticmethod
    def load_yaml(path: Path) -> dict[str, typing.Any]:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def env_overrides(self, log_messages: LogMessages) -> dict[str, typing.Any]:
        overrides: dict[str, typing.Any] = {}

        quit_key = self.get_env('QUIT_KEY')
        if quit_key is not None:
            overrides['quit_key'] = quit_key

        idle_timeout = self.get_env('IDLE_TIMEOUT')
        if idle_timeout is not None:
            try:
                overrides['idle_timeout'] = float(idle_timeout)
            except ValueError:
                log_messages.add_log_message(LogMessage(
                    f'Environment value {self.ENV_PREFIX}IDLE_TIMEOUT="{idle_timeout}" is not a number',
                    LogLevels.ERROR.key
                ))

        return overrides

    def load_base_config(self, log_messages: LogMessages) -> BaseConfig:
        base_path = self.CONFIG_DIR / 'base.yaml'
        if not base_path.exists():
            log_messages.add_log_message(LogMessage(
                f'Base config "{base_path}" not found, using standard config (run: tcal init)',
                LogLevels.INFO.key
            ))
            return BaseConfig(log_messages=log_messages, warn_missing=False, **self.env_overrides(log_messages))

        try:
            pure_yaml: dict[str, typing.Any] = self.load_yaml(base_path)
        except yaml.YAMLError:
            raise YAMLParseException(f'Base config "{base_path}" not valid YAML')

        if not isinstance(pure_yaml, dict):
            raise YAMLParseException(f'Base config "{base_path}" is not a mapping')

        if not all(isinstance(key, str) for key in pure_yaml):
            raise YAMLParseException(f'Base config "{base_path}" has keys that are not strings')

        return BaseConfig(log_messages=log_messages, **(pure_yaml | self.env_overrides(log_messages)))


class ConfigScanner:
    def __init__(self, config_loader: ConfigLoader) -> None:
        self.config_loader = config_loader

    def scan_config(self) -> LogMessages | typing.Literal[True]:
        """Scan config, either returns log messages or 'True' representing that no errors were found"""
        current_log: LogMessages = LogMessages()
        try:
            self.config_loader.load_base_config(current_log)
        except YAMLParseException as e:
            return LogMessages([LogMessage(str(e), LogLevels.ERROR.key)])

        if current_log.contains_error():
            return current_log
        return True


def init_colors(base_config: BaseConfig) -> None:
    if not curses.has_colors():
        return  # Attributes (bold, reverse, ...) still apply
    curses.start_color()
    if base_config.use_standard_terminal_background:
        curses.use_default_colors()

    if curses.can_change_color() and curses.COLORS >= 16:
        for color_number, color in base_config.base_colors.items():
            curses.init_color(
                color_number,
                *color[1].rgb_to_0_1000()  # type: ignore[union-attr]
            )
    else:
        base_config.base_colors = {
            curses.COLOR_WHITE: (base_config.FOREGROUND_PAIR_NUMBER, curses.COLOR_WHITE, False),
            curses.COLOR_YELLOW: (base_config.HIGHLIGHT_PAIR_NUMBER, curses.COLOR_YELLOW, False),
            curses.COLOR_RED: (base_config.WARNING_PAIR_NUMBER, curses.COLOR_RED, False),
            curses.COLOR_GREEN: (base_config.SUCCESS_BACKGROUND_PAIR_NUMBER, curses.COLOR_GREEN, True),
            curses.COLOR_BLUE: (base_config.INFO_BACKGROUND_PAIR_NUMBER, curses.COLOR_BLUE, True),
        }

    for color_number, (pair_number, _color, as_background) in base_config.base_colors.items():
        if as_background:
            curses.init_pair(pair_number, curses.COLOR_BLACK, color_number)
        else:
            curses.init_pair(pair_number, color_number, base_config.BACKGROUND_NUMBER)


def init_curses_setup(stdscr: CursesWindowType, base_config: BaseConfig) -> None:
    curses.raw()  # Ctrl-C arrives as a key instead of SIGINT
    curses.curs_set(0)
    curses.set_escdelay(25)
    stdscr.keypad(True)
    init_colors(base_config)
    stdscr.bkgd(' ', curses.color_pair(base_config.FOREGROUND_PAIR_NUMBER))
    stdscr.clear()
    stdscr.refresh()


def safe_addstr(win: typing.Any, y: int, x: int, text: str, attr: int = 0) -> None:
    max_y, max_x = win.getmaxyx()
    if y < 0 or y >= max_y or x < 0 or x >= max_x:
        return
    safe_text = text[:max_x - x]
    if not safe_text:
        return
    try:
        win.addstr(y, x, safe_text, attr)
    except curses.error:
        pass  # Writing the bottom-right cell moves the cursor off-screen and errors after drawing


def curses_wrapper(func: typing.Callable[[CursesWindowType], None]) -> None:
    curses.wrapper(func)


# Constants

CursesWindowType = _curses.window  # Type of stdscr

CursesBold = curses.A_BOLD
CursesReverse = curses.A_REVERSE
CursesDim = curses.A_DIM
CursesItalic = getattr(curses, 'A_ITALIC', 0)  # Not every ncurses build exposes italics
CursesError = _curses.error


class CursesKeys(IntEnum):
    UP = curses.KEY_UP
    DOWN = curses.KEY_DOWN
    LEFT = curses.KEY_LEFT
    RIGHT = curses.KEY_RIGHT
    RESIZE = curses.KEY_RESIZE
    CTRL_C = 3
