from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Literal

from jumper.core.errors import DirectoryReadError
from jumper.core.logging import get_logger, log_event

SortMode = Literal["name", "size", "modified"]

SORT_MODE_LABELS: dict[SortMode, str] = {
    "name": "Name",
    "size": "Size",
    "modified": "Modified",
}

logger = get_logger("jumper.listing")


@dataclass(frozen=True, slots=True)
class Entry:
    """Snapshot of one directory child; replaced wholesale on every reload."""

    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False
    is_executable: bool = False
    is_hidden: bool = False
    size: int = 0
    modified: float | None = None

    @property
    def display_name(self) -> str:
        return f"{self.name}/" if self.is_dir else self.name


def normalize_sort_mode(value: object) -> SortMode:
    text = str(value or "").strip().lower()
    if text in SORT_MODE_LABELS:
        return text  # type: ignore[return-value]
    return "name"


def _safe_stat(entry: os.DirEntry[str]) -> os.stat_result | None:
    try:
        return entry.stat(follow_symlinks=True)
    except OSError:
        pass
    # Broken symlinks still get listed with their own metadata.
    try:
        return entry.stat(follow_symlinks=False)
    except OSError:
        return None


def build_entry(dir_entry: os.DirEntry[str]) -> Entry:
    name = dir_entry.name
    try:
        is_symlink = dir_entry.is_symlink()
    except OSError:
        is_symlink = False
    try:
        is_dir = dir_entry.is_dir(follow_symlinks=True)
    except OSError:
        is_dir = False
    stat_result = _safe_stat(dir_entry)
    size = 0
    modified: float | None = None
    is_executable = False
    if stat_result is not None:
        size = stat_result.st_size
        modified = stat_result.st_mtime
        if not is_dir and os.name != "nt":
            is_executable = bool(stat_result.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
    return Entry(
        name=name,
        path=Path(dir_entry.path),
        is_dir=is_dir,
        is_symlink=is_symlink,
        is_executable=is_executable,
        is_hidden=name.startswith("."),
        size=size,
        modified=modified,
    )


def load_entries(directory: Path, *, show_hidden: bool = False) -> list[Entry]:
    """Read and classify the children of directory (unsorted)."""
    entries: list[Entry] = []
    try:
        with os.scandir(directory) as scan:
            for dir_entry in scan:
                if not show_hidden and dir_entry.name.startswith("."):
                    continue
                entries.append(build_entry(dir_entry))
    except OSError as exc:
        reason = exc.strerror or str(exc)
        log_event(logger, "directory_read_failed", path=directory, reason=reason)
        raise DirectoryReadError(directory, reason) from exc
    log_event(logger, "directory_loaded", path=directory, count=len(entries))
    return entries


def _name_key(entry: Entry) -> tuple[str, str]:
    return (entry.name.casefold(), entry.name)


def _entry_sort_key(entry: Entry, sort_by: SortMode) -> tuple[object, ...]:
    if sort_by == "modified":
        metric = entry.modified if entry.modified is not None else float("-inf")
        return (metric, *_name_key(entry))
    if sort_by == "size" and not entry.is_dir:
        return (entry.size, *_name_key(entry))
    # Directory inode sizes carry no meaning, so size mode orders them by name.
    return _name_key(entry)


def sort_entries(
    entries: Iterable[Entry],
    sort_by: SortMode = "name",
    *,
    descending: bool = False,
) -> list[Entry]:
    """Directories first, then files; each group ordered by sort_by."""
    mode = normalize_sort_mode(sort_by)
    directories: list[Entry] = []
    files: list[Entry] = []
    for entry in entries:
        (directories if entry.is_dir else files).append(entry)
    directories.sort(key=lambda item: _entry_sort_key(item, mode), reverse=descending)
    files.sort(key=lambda item: _entry_sort_key(item, mode), reverse=descending)
    return directories + files


def format_size(size: int) -> str:
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    if size >= gb:
        return f"{size / gb:.2f} GB"
    if size >= mb:
        return f"{size / mb:.2f} MB"
    if size >= kb:
        return f"{size / kb:.2f} KB"
    return f"{size} B"
