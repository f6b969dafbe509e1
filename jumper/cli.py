from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from jumper import __version__
from jumper.app import main as run_app
from jumper.core.config import get_runtime_config, resolve_lastdir_path, resolve_settings_path
from jumper.core.errors import JumperError, format_error
from jumper.core.settings_store import SettingsStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jumper",
        description="jumper - keyboard-driven terminal file browser",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit.",
    )

    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Parse CLI arguments without launching the UI.",
    )

    subparsers = parser.add_subparsers(dest="command")

    config_parser = subparsers.add_parser(
        "print-config",
        help="Print resolved runtime config and settings to stdout.",
    )
    config_parser.set_defaults(handler=handle_print_config)

    browse_parser = subparsers.add_parser(
        "browse",
        help="Open the browser in PATH (default: the working directory).",
    )
    browse_parser.add_argument("path", nargs="?", help="Directory to start in.")
    browse_parser.set_defaults(handler=None)

    return parser


def handle_print_config(_args: argparse.Namespace) -> None:
    settings_path = resolve_settings_path()
    settings_store = SettingsStore(settings_path)
    payload = {
        "runtime": get_runtime_config().model_dump(mode="json"),
        "settings_path": str(settings_path),
        "lastdir_path": str(resolve_lastdir_path()),
        "settings": settings_store.load().model_dump(mode="json"),
    }
    print(json.dumps(payload, indent=2))


def _insert_browse_command(argv: list[str]) -> list[str]:
    """A bare directory argument is shorthand for "browse PATH"."""
    for index, arg in enumerate(argv):
        if arg.startswith("-"):
            continue
        if arg in {"print-config", "browse"}:
            return argv
        return [*argv[:index], "browse", *argv[index:]]
    return argv


def main(argv: Sequence[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    argv = _insert_browse_command(argv)
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "print-config":
        args.handler(args)
        return

    if args.no_ui:
        return

    start = Path(args.path) if getattr(args, "path", None) else None

    try:
        run_app(start)
    except JumperError as exc:
        message, _severity = format_error(exc)
        raise SystemExit(f"jumper: {message}") from exc


if __name__ == "__main__":
    main()
