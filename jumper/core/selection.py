from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jumper.core.history import clamp_cursor
from jumper.services.file_listing import Entry


class SelectionModel:
    """Cursor row, path-keyed marks and the extend-on-move flag.

    Marks are stored as paths so they survive sorting, search and reloads;
    positional indices are derived only when asked for.
    """

    def __init__(self) -> None:
        self._entries: Sequence[Entry] = ()
        self.cursor: int | None = None
        self._marks: set[Path] = set()
        self.extending = False

    @property
    def entries(self) -> Sequence[Entry]:
        return self._entries

    @property
    def marks(self) -> frozenset[Path]:
        return frozenset(self._marks)

    def set_entries(self, entries: Sequence[Entry], *, cursor: int | None = 0) -> None:
        """Swap in a new listing; marks that no longer resolve are dropped."""
        self._entries = entries
        valid = {entry.path for entry in entries}
        self._marks = {path for path in self._marks if path in valid}
        self.cursor = clamp_cursor(cursor if cursor is not None else 0, len(entries))

    def cursor_entry(self) -> Entry | None:
        if self.cursor is None or not self._entries:
            return None
        return self._entries[self.cursor]

    def index_of(self, path: Path) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.path == path:
                return index
        return None

    def move_to(self, index: int) -> bool:
        target = clamp_cursor(index, len(self._entries))
        if target is None:
            self.cursor = None
            return False
        changed = target != self.cursor
        self.cursor = target
        if self.extending:
            self._marks.add(self._entries[target].path)
        return changed

    def move_by(self, delta: int) -> bool:
        if self.cursor is None:
            return self.move_to(0)
        return self.move_to(self.cursor + delta)

    def toggle_mark(self) -> None:
        entry = self.cursor_entry()
        if entry is None:
            return
        if entry.path in self._marks:
            self._marks.discard(entry.path)
        else:
            self._marks.add(entry.path)

    def begin_extend(self) -> None:
        self.extending = True
        entry = self.cursor_entry()
        if entry is not None:
            self._marks.add(entry.path)

    def end_extend(self, *, keep_marks: bool) -> None:
        self.extending = False
        if not keep_marks:
            self._marks.clear()

    def clear_marks(self) -> None:
        self._marks.clear()

    def marked_indices(self) -> frozenset[int]:
        return frozenset(
            index for index, entry in enumerate(self._entries) if entry.path in self._marks
        )

    def targets(self) -> tuple[Path, ...]:
        """Marked paths in listing order, or the cursor row when nothing is marked."""
        if self._marks:
            ordered = [entry.path for entry in self._entries if entry.path in self._marks]
            remaining = sorted(self._marks.difference(ordered), key=str)
            return tuple(ordered + remaining)
        entry = self.cursor_entry()
        return (entry.path,) if entry is not None else ()
