from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Sequence, TypeVar

from jumper.services.file_listing import Entry

_PathT = TypeVar("_PathT", bound=PurePath)


@dataclass(frozen=True, slots=True)
class HistoryFrame:
    """Where the user was (and which row was under the cursor) when leaving."""

    path: Path
    cursor_hint: int


def parent_directory(path: _PathT) -> _PathT | None:
    parent = path.parent
    if parent == path:
        return None
    return parent


def is_navigable_directory(path: Path) -> bool:
    return path.exists() and path.is_dir()


def clamp_cursor(hint: int, length: int) -> int | None:
    if length <= 0:
        return None
    return max(0, min(hint, length - 1))


def relocate_cursor(
    entries: Sequence[Entry],
    departed: Path,
    *,
    fallback_hint: int = 0,
) -> int | None:
    """Index of the entry named like the departed directory, else the clamped hint."""
    name = departed.name
    for index, entry in enumerate(entries):
        if entry.name == name:
            return index
    return clamp_cursor(fallback_hint, len(entries))


@dataclass
class NavigationHistory:
    """Two independent stacks of frames.

    ``ascent`` retraces the exact descent path: pushed on enter, popped on
    parent. ``jumps`` records every transition and is popped only by "back".
    """

    ascent: list[HistoryFrame] = field(default_factory=list)
    jumps: list[HistoryFrame] = field(default_factory=list)

    def record_enter(self, frame: HistoryFrame) -> None:
        self.ascent.append(frame)
        self.jumps.append(frame)

    def record_jump(self, frame: HistoryFrame) -> None:
        self.jumps.append(frame)

    def pop_ascent(self) -> HistoryFrame | None:
        return self.ascent.pop() if self.ascent else None

    def pop_jump(self) -> HistoryFrame | None:
        return self.jumps.pop() if self.jumps else None

    def reset_ascent(self) -> None:
        self.ascent.clear()
