from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from jumper.core.errors import OpenFailedError
from jumper.core.logging import get_logger, log_event

logger = get_logger("jumper.opener")


def default_open_command(path: Path) -> list[str]:
    target = str(path)
    if sys.platform == "darwin":
        return ["open", target]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", "", target]
    return ["xdg-open", target]


def open_with_default_app(path: Path) -> None:
    """Hand a regular file to the platform's default handler without waiting on it."""
    if not path.is_file():
        raise OpenFailedError(path, "not a regular file")
    command = default_open_command(path)
    try:
        subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=sys.platform != "win32",
        )
    except OSError as exc:
        raise OpenFailedError(path, exc.strerror or str(exc)) from exc
    log_event(logger, "file_opened", path=path, command=command[0])
