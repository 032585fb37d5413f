import functools
from pathlib import Path

import tcal.core.base as base
from tcal.core.app import run_calendar
from tcal.core.navigation import NavigationState
from tcal.core.terminal import CursesDisplay, CursesInput, KeyMap, build_palette


def main_curses(stdscr: base.CursesWindowType, base_config: base.BaseConfig) -> None:
    # Initiate setup (curses.wrapper already switched to the alternate screen)
    base.init_curses_setup(stdscr, base_config)

    state: NavigationState = NavigationState.starting_today()

    run_calendar(
        state,
        CursesInput(stdscr),
        CursesDisplay(stdscr, build_palette(base_config)),
        KeyMap.from_config(base_config),
        idle_timeout=base_config.idle_timeout
    )


def load_config(config_dir: Path | None = None) -> tuple[base.BaseConfig, base.LogMessages]:
    # Logs (e.g. Warnings)
    log_messages: base.LogMessages = base.LogMessages()

    config_loader: base.ConfigLoader = base.ConfigLoader(config_dir)
    config_loader.reload_env()  # needed to pick up tcal.env changes

    config_scan_results: base.LogMessages | bool = base.ConfigScanner(config_loader).scan_config()
    if config_scan_results is not True:
        raise base.ConfigScanFoundError(config_scan_results)  # type: ignore[arg-type]

    return config_loader.load_base_config(log_messages), log_messages


def main_entry_point(config_dir: Path | None = None) -> int:
    """Run the calendar, returning the process exit code.

    curses.wrapper restores the terminal before any exception reaches the
    handlers below, so every message is printed to a normal screen.
    """
    try:
        base_config, log_messages = load_config(config_dir)
    except base.ConfigScanFoundError as e:
        e.log_messages.print_log_messages(heading='Config errors & warnings (found by ConfigScanner):\n')
        return 1

    try:
        base.curses_wrapper(functools.partial(main_curses, base_config=base_config))
    except KeyboardInterrupt:
        return 0
    except base.DateArithmeticError as e:
        print(f'⚠️ Date Error: {e}')
        return 1
    except base.DisplayError as e:
        print(f'⚠️ Display Error: {e}')
        return 1
    except base.InputError as e:
        print(f'⚠️ Input Error: {e}')
        return 1
    except base.CursesError as e:
        print(f'⚠️ Terminal setup failed: {e}')
        return 1
    finally:
        # Warnings and info collected while loading the config
        log_messages.print_log_messages(heading='Config warnings & info:\n')
    return 0


if __name__ == '__main__':
    raise SystemExit(main_entry_point())
