import argparse
import sys
import shutil
from pathlib import Path
from . import main as app_main

from importlib.resources import files, as_file


def default_config_dir() -> Path:
    return Path.home() / ".config" / "tcal"


def init_command(args: argparse.Namespace) -> int:
    """
    Handles the 'tcal init' subcommand.
    """
    source_config_dir_traversable = files("tcal.config")
    dest_config_dir: Path = args.config_dir or default_config_dir()

    try:
        dest_config_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created config directory: {dest_config_dir}")
    except OSError as e:
        print(f"Error: Could not create directory {dest_config_dir}. {e}", file=sys.stderr)
        return 1

    # 'as_file' gives a concrete Path on the filesystem
    with as_file(source_config_dir_traversable) as source_config_path:
        print(f"Copying YAML & ENV files from package config to {dest_config_dir}...")

        source_files = sorted(source_config_path.glob("*.yaml")) + sorted(source_config_path.glob("*.env"))
        if not source_files:
            print("Warning: No YAML & ENV files found in the package config.", file=sys.stderr)
            return 1

        for source_file in source_files:
            dest_file = dest_config_dir / source_file.name

            if not dest_file.exists() or args.force:
                try:
                    shutil.copy2(source_file, dest_file)
                    print(f"  Copied: {source_file.name}")
                except OSError as e:
                    print(f"  Error copying {source_file.name}: {e}", file=sys.stderr)
                    return 1
            else:
                print(f"  Skipped (exists): {source_file.name}")

    print("\nInitialization complete.")
    print(f"Your configuration files are in: {dest_config_dir}")
    return 0


def run_command(args: argparse.Namespace) -> int:
    return app_main.main_entry_point(args.config_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcal",
        description="Terminal month calendar. Arrow keys move the selected day, q quits."
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Configuration directory (default: ~/.config/tcal)."
    )
    parser.set_defaults(func=run_command)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    init_parser = subparsers.add_parser("init", help="Initialize user configuration files.")
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing configuration files."
    )
    init_parser.set_defaults(func=init_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the 'tcal' command.
    """
    args = build_parser().parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
