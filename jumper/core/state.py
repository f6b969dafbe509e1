from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Union

from jumper.core.errors import Severity
from jumper.core.size_cache import SizeEntry
from jumper.services.file_listing import Entry, SortMode
from jumper.services.fuzzy import FuzzyMatch


@dataclass(frozen=True, slots=True)
class NormalMode:
    name: str = "normal"


@dataclass(frozen=True, slots=True)
class MarkingMode:
    name: str = "marking"


@dataclass(frozen=True, slots=True)
class SearchMode:
    name: str = "search"


@dataclass(frozen=True, slots=True)
class SortMenuMode:
    name: str = "sort_menu"


@dataclass(frozen=True, slots=True)
class CreateInputMode:
    buffer: str = ""
    name: str = "create_input"


@dataclass(frozen=True, slots=True)
class RenameInputMode:
    target: Path
    buffer: str = ""
    name: str = "rename_input"


@dataclass(frozen=True, slots=True)
class HelpOverlayMode:
    name: str = "help"


@dataclass(frozen=True, slots=True)
class DeleteConfirmMode:
    targets: tuple[Path, ...]
    name: str = "delete_confirm"


Mode = Union[
    NormalMode,
    MarkingMode,
    SearchMode,
    SortMenuMode,
    CreateInputMode,
    RenameInputMode,
    HelpOverlayMode,
    DeleteConfirmMode,
]


@dataclass(frozen=True, slots=True)
class EmptyClipboard:
    kind: str = "empty"

    @property
    def paths(self) -> tuple[Path, ...]:
        return ()


@dataclass(frozen=True, slots=True)
class CopyClipboard:
    paths: tuple[Path, ...]
    kind: str = "copy"


@dataclass(frozen=True, slots=True)
class CutClipboard:
    paths: tuple[Path, ...]
    kind: str = "cut"


ClipboardState = Union[EmptyClipboard, CopyClipboard, CutClipboard]


@dataclass(frozen=True, slots=True)
class SearchState:
    query: str = ""
    matches: tuple[FuzzyMatch, ...] = ()

    @property
    def active(self) -> bool:
        return bool(self.query)

    def positions_by_index(self) -> dict[int, tuple[int, ...]]:
        return {match.index: match.positions for match in self.matches}


@dataclass(frozen=True, slots=True)
class StatusMessage:
    text: str
    severity: Severity = "error"
    expires_at: float = 0.0


@dataclass(frozen=True, slots=True)
class BrowserSnapshot:
    """Read-only view of controller state handed to the renderer every tick."""

    current_dir: Path
    entries: tuple[Entry, ...]
    cursor: int | None
    marked: frozenset[int]
    mode: Mode
    search: SearchState
    clipboard: ClipboardState
    sort_by: SortMode
    sort_descending: bool
    show_hidden: bool
    sizes: Mapping[Path, SizeEntry] = field(default_factory=dict)
    flash_paths: frozenset[Path] = frozenset()
    message: StatusMessage | None = None

    def clipboard_summary(self) -> str:
        if isinstance(self.clipboard, CopyClipboard):
            return f"Copied: {len(self.clipboard.paths)}"
        if isinstance(self.clipboard, CutClipboard):
            return f"Cut: {len(self.clipboard.paths)}"
        return ""
