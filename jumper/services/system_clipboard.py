"""Best-effort bridge to the desktop clipboard through platform commands."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Sequence


def _copy_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> bool:
    if not text:
        return False
    for command in _copy_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(command, input=text, text=True, check=False, timeout=2)
        except (OSError, subprocess.SubprocessError):
            continue
        if proc.returncode == 0:
            return True
    return False


def export_paths(paths: Sequence[Path]) -> bool:
    return copy_text_to_clipboard("\n".join(str(path) for path in paths))


def _paste_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbpaste"]]
    if os.name == "nt":
        return [["powershell", "-NoProfile", "-Command", "Get-Clipboard"]]
    return [
        ["wl-paste", "--no-newline"],
        ["xclip", "-selection", "clipboard", "-o"],
        ["xsel", "--clipboard", "--output"],
    ]


def read_text_from_clipboard() -> str | None:
    for command in _paste_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command, capture_output=True, text=True, check=False, timeout=2
            )
        except (OSError, subprocess.SubprocessError):
            continue
        if proc.returncode == 0:
            return proc.stdout
    return None


def import_paths() -> list[Path]:
    """Newline-separated paths from the system clipboard, blank lines skipped."""
    text = read_text_from_clipboard()
    if not text:
        return []
    return [Path(line.strip()).expanduser() for line in text.splitlines() if line.strip()]
