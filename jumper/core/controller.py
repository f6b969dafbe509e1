from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, Sequence

from jumper.core.errors import (
    BatchResult,
    DirectoryReadError,
    JumperError,
    Severity,
    StartupError,
    format_error,
)
from jumper.core.file_ops import FileOperationEngine
from jumper.core.history import (
    HistoryFrame,
    NavigationHistory,
    clamp_cursor,
    is_navigable_directory,
    parent_directory,
    relocate_cursor,
)
from jumper.core.keys import (
    DEFAULT_NORMAL_BINDINGS,
    DEFAULT_NORMAL_SEQUENCES,
    BindingTable,
    KeyDescriptor,
    KeyEvent,
    SequenceTable,
    build_quick_jump_table,
)
from jumper.core.logging import get_logger, log_event, log_failure
from jumper.core.selection import SelectionModel
from jumper.core.settings_model import SettingsModel
from jumper.core.size_cache import DirectorySizeCache
from jumper.core.state import (
    BrowserSnapshot,
    ClipboardState,
    CopyClipboard,
    CreateInputMode,
    CutClipboard,
    DeleteConfirmMode,
    EmptyClipboard,
    HelpOverlayMode,
    MarkingMode,
    Mode,
    NormalMode,
    RenameInputMode,
    SearchMode,
    SearchState,
    SortMenuMode,
    StatusMessage,
)
from jumper.services.file_listing import (
    Entry,
    SortMode,
    load_entries,
    normalize_sort_mode,
    sort_entries,
)
from jumper.services.fuzzy import search_names
from jumper.services.opener import open_with_default_app
from jumper.services.system_clipboard import export_paths, import_paths

logger = get_logger("jumper.controller")

Loader = Callable[..., list[Entry]]

MARKING_BINDINGS: dict[str, str] = {
    "escape": "cancel_marking",
    "enter": "confirm_marking",
    "j,down": "cursor_down",
    "k,up": "cursor_up",
    "space": "toggle_mark",
    "y": "copy",
    "x": "cut",
    "d,delete": "delete",
}

SORT_MENU_BINDINGS: dict[str, str] = {
    "n": "sort_name",
    "s": "sort_size",
    "m": "sort_modified",
    "r": "sort_reverse",
    "escape": "close_menu",
}

DELETE_CONFIRM_BINDINGS: dict[str, str] = {
    "y,shift+y": "confirm_delete",
    "n,shift+n,escape,enter": "cancel_delete",
}

HISTORY_BACK_FALLBACK = "ctrl+o"


class BrowserController:
    """Mode state machine that turns key events into browser state changes.

    ``handle`` never raises for file-system trouble: failures become a
    transient ``StatusMessage`` while listing and mode stay as they were.
    """

    PAGE_STEP = 10

    def __init__(
        self,
        start_dir: Path,
        settings: SettingsModel | None = None,
        *,
        file_ops: FileOperationEngine | None = None,
        size_cache: DirectorySizeCache | None = None,
        loader: Loader = load_entries,
        opener: Callable[[Path], None] = open_with_default_app,
        clipboard_export: Callable[[Sequence[Path]], bool] = export_paths,
        clipboard_import: Callable[[], list[Path]] = import_paths,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = settings or SettingsModel()
        behavior = settings.behavior
        self.file_ops = file_ops or FileOperationEngine()
        self.size_cache = size_cache or DirectorySizeCache()
        self._loader = loader
        self._opener = opener
        self._clipboard_export = clipboard_export
        self._clipboard_import = clipboard_import
        self._clock = clock

        self.current_dir = start_dir
        self.selection = SelectionModel()
        self.history = NavigationHistory()
        self.clipboard: ClipboardState = EmptyClipboard()
        self.mode: Mode = NormalMode()
        self.search = SearchState()
        self.sort_by: SortMode = normalize_sort_mode(behavior.default_sort)
        self.sort_descending = False
        self.show_hidden = behavior.show_hidden
        self.delete_confirmation = behavior.delete_confirmation
        self.message: StatusMessage | None = None
        self.flash_paths: frozenset[Path] = frozenset()
        self.should_quit = False

        self._message_seconds = behavior.message_duration_ms / 1000
        self._flash_seconds = behavior.flash_duration_ms / 1000
        self._flash_until = 0.0
        self._last_key: str | None = None

        self._normal_bindings = BindingTable(DEFAULT_NORMAL_BINDINGS)
        self._marking_bindings = BindingTable(MARKING_BINDINGS)
        self._sort_bindings = BindingTable(SORT_MENU_BINDINGS)
        self._delete_bindings = BindingTable(DELETE_CONFIRM_BINDINGS)
        self._history_back = self._parse_history_back(settings.keybindings.history_back)
        self._sequences = SequenceTable()
        for sequence, action in DEFAULT_NORMAL_SEQUENCES.items():
            self._sequences.add(sequence, action)
        self._quick_jumps = SequenceTable()
        for sequence, target in build_quick_jump_table(settings.keybindings.quick_jumps).items():
            self._quick_jumps.add(sequence, target)

        self._handlers: dict[type, Callable[[KeyEvent], bool]] = {
            NormalMode: self._handle_normal,
            MarkingMode: self._handle_marking,
            SearchMode: self._handle_search,
            SortMenuMode: self._handle_sort_menu,
            CreateInputMode: self._handle_create_input,
            RenameInputMode: self._handle_rename_input,
            HelpOverlayMode: self._handle_help,
            DeleteConfirmMode: self._handle_delete_confirm,
        }

        try:
            entries = self._load(start_dir)
        except DirectoryReadError as exc:
            raise StartupError(f"Cannot open start directory {start_dir}", exc.detail) from exc
        self._install_listing(start_dir, entries, 0)

    @staticmethod
    def _parse_history_back(text: str) -> KeyDescriptor:
        try:
            return KeyDescriptor.parse(text)
        except ValueError:
            log_failure(logger, "invalid_history_back_binding", value=text)
            return KeyDescriptor.parse(HISTORY_BACK_FALLBACK)

    # -- input ---------------------------------------------------------------

    def handle(self, event: KeyEvent) -> None:
        """Interpret one key press according to the active mode."""
        handler = self._handlers[type(self.mode)]
        matched_sequence = False
        try:
            matched_sequence = handler(event)
        except (JumperError, OSError) as exc:
            self._report(exc)
        if matched_sequence or not isinstance(self.mode, NormalMode):
            self._last_key = None
        else:
            self._last_key = event.canonical

    def _run(self, action: str) -> None:
        self.message = None
        getattr(self, f"action_{action}")()

    def _handle_normal(self, event: KeyEvent) -> bool:
        if self._history_back.matches(event):
            self._run("history_back")
            return False
        target = self._quick_jumps.lookup(self._last_key, event.canonical)
        if isinstance(target, Path):
            self.message = None
            self.quick_jump(target)
            return True
        action = self._sequences.lookup(self._last_key, event.canonical)
        if isinstance(action, str):
            self._run(action)
            return True
        action = self._normal_bindings.action_for(event)
        if action is not None:
            self._run(action)
        return False

    def _handle_marking(self, event: KeyEvent) -> bool:
        action = self._marking_bindings.action_for(event)
        if action is None:
            return False
        if action in ("copy", "cut", "delete"):
            self.selection.end_extend(keep_marks=True)
            self.mode = NormalMode()
        self._run(action)
        return False

    def _handle_search(self, event: KeyEvent) -> bool:
        if event.key == "escape":
            self.clear_search()
            self.mode = NormalMode()
        elif event.key == "enter":
            self.mode = NormalMode()
        elif event.key == "backspace":
            self._update_search(self.search.query[:-1])
        elif event.is_text:
            self._update_search(self.search.query + event.key)
        return False

    def _handle_sort_menu(self, event: KeyEvent) -> bool:
        action = self._sort_bindings.action_for(event)
        if action is not None:
            self._run(action)
        return False

    def _handle_create_input(self, event: KeyEvent) -> bool:
        assert isinstance(self.mode, CreateInputMode)
        buffer = self._edit_buffer(self.mode.buffer, event)
        if buffer is None:
            return False
        if event.key == "enter":
            self._confirm_create(buffer)
        else:
            self.mode = CreateInputMode(buffer=buffer)
        return False

    def _handle_rename_input(self, event: KeyEvent) -> bool:
        mode = self.mode
        assert isinstance(mode, RenameInputMode)
        buffer = self._edit_buffer(mode.buffer, event)
        if buffer is None:
            return False
        if event.key == "enter":
            self._confirm_rename(mode.target, buffer)
        else:
            self.mode = RenameInputMode(target=mode.target, buffer=buffer)
        return False

    def _edit_buffer(self, buffer: str, event: KeyEvent) -> str | None:
        """Apply a key to a text buffer; None means the input was cancelled."""
        if event.key == "escape":
            self.mode = NormalMode()
            return None
        if event.key == "backspace":
            return buffer[:-1]
        if event.is_text:
            return buffer + event.key
        return buffer

    def _handle_help(self, event: KeyEvent) -> bool:
        self.mode = NormalMode()
        return False

    def _handle_delete_confirm(self, event: KeyEvent) -> bool:
        action = self._delete_bindings.action_for(event)
        if action is not None:
            self._run(action)
        return False

    # -- normal mode actions ---------------------------------------------------

    def action_quit(self) -> None:
        self.should_quit = True

    def action_cursor_down(self) -> None:
        self.selection.move_by(1)

    def action_cursor_up(self) -> None:
        self.selection.move_by(-1)

    def action_cursor_top(self) -> None:
        self.selection.move_to(0)

    def action_cursor_bottom(self) -> None:
        self.selection.move_to(len(self.selection.entries) - 1)

    def action_page_down(self) -> None:
        self.selection.move_by(self.PAGE_STEP)

    def action_page_up(self) -> None:
        self.selection.move_by(-self.PAGE_STEP)

    def action_go_parent(self) -> None:
        self.go_parent()

    def action_history_back(self) -> None:
        self.go_back()

    def action_open(self) -> None:
        entry = self.selection.cursor_entry()
        if entry is None:
            return
        if entry.is_dir:
            self.enter_directory()
            return
        self._opener(entry.path)

    def action_toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        try:
            self.reload()
        except JumperError:
            self.show_hidden = not self.show_hidden
            raise

    def action_enter_marking(self) -> None:
        if not self.selection.entries:
            return
        self.selection.begin_extend()
        self.mode = MarkingMode()

    def action_toggle_mark(self) -> None:
        self.selection.toggle_mark()

    def action_copy(self) -> None:
        targets = self.selection.targets()
        if not targets:
            return
        self.clipboard = CopyClipboard(targets)
        self.selection.clear_marks()
        self.flash_paths = frozenset(targets)
        self._flash_until = self._clock() + self._flash_seconds

    def action_cut(self) -> None:
        targets = self.selection.targets()
        if not targets:
            return
        self.clipboard = CutClipboard(targets)
        self.selection.clear_marks()

    def action_paste(self) -> None:
        clipboard = self.clipboard
        if isinstance(clipboard, EmptyClipboard):
            self._notify("Nothing to paste.")
            return
        if isinstance(clipboard, CopyClipboard):
            result = self.file_ops.copy(clipboard.paths, self.current_dir)
        else:
            result = self.file_ops.move(clipboard.paths, self.current_dir)
            remaining = tuple(path for path, _ in result.failures if os.path.lexists(path))
            self.clipboard = CutClipboard(remaining) if remaining else EmptyClipboard()
        focus = result.completed[0][1] if result.completed else None
        self.reload(cursor_path=focus)
        self._report_batch(result)

    def action_export_paths(self) -> None:
        targets = self.selection.targets()
        if not targets:
            return
        if self._clipboard_export(targets):
            self._notify(f"Exported {len(targets)} path(s) to the clipboard.")
        else:
            self._notify("No system clipboard tool available.", severity="warning")

    def action_import_paths(self) -> None:
        paths = tuple(dict.fromkeys(path for path in self._clipboard_import() if os.path.lexists(path)))
        if not paths:
            self._notify("No existing paths on the system clipboard.", severity="warning")
            return
        self.clipboard = CopyClipboard(paths)
        self._notify(f"Imported {len(paths)} path(s); paste with p.")

    def action_search(self) -> None:
        self.clear_search()
        self.mode = SearchMode()

    def action_next_match(self) -> None:
        self._step_match(1)

    def action_previous_match(self) -> None:
        self._step_match(-1)

    def action_sort_menu(self) -> None:
        self.mode = SortMenuMode()

    def action_create(self) -> None:
        self.mode = CreateInputMode()

    def action_rename(self) -> None:
        entry = self.selection.cursor_entry()
        if entry is None:
            return
        self.mode = RenameInputMode(target=entry.path, buffer=entry.name)

    def action_delete(self) -> None:
        targets = self.selection.targets()
        if not targets:
            return
        if self.delete_confirmation:
            self.mode = DeleteConfirmMode(targets=targets)
            return
        self._delete(targets)

    def action_help(self) -> None:
        self.mode = HelpOverlayMode()

    def action_clear(self) -> None:
        if isinstance(self.clipboard, CutClipboard):
            self.clipboard = EmptyClipboard()
        self.selection.clear_marks()
        self.clear_search()

    # -- other mode actions ----------------------------------------------------

    def action_cancel_marking(self) -> None:
        self.selection.end_extend(keep_marks=False)
        self.mode = NormalMode()

    def action_confirm_marking(self) -> None:
        self.selection.end_extend(keep_marks=True)
        self.mode = NormalMode()

    def action_sort_name(self) -> None:
        self.set_sort("name")

    def action_sort_size(self) -> None:
        self.set_sort("size")

    def action_sort_modified(self) -> None:
        self.set_sort("modified")

    def action_sort_reverse(self) -> None:
        self.set_sort(self.sort_by, descending=not self.sort_descending)

    def action_close_menu(self) -> None:
        self.mode = NormalMode()

    def action_confirm_delete(self) -> None:
        mode = self.mode
        assert isinstance(mode, DeleteConfirmMode)
        self.mode = NormalMode()
        self._delete(mode.targets)

    def action_cancel_delete(self) -> None:
        self.mode = NormalMode()

    # -- navigation ------------------------------------------------------------

    def _current_frame(self) -> HistoryFrame:
        return HistoryFrame(self.current_dir, self.selection.cursor or 0)

    def enter_directory(self) -> None:
        entry = self.selection.cursor_entry()
        if entry is None or not entry.is_dir:
            return
        entries = self._load(entry.path)
        self.history.record_enter(self._current_frame())
        self._install_listing(entry.path, entries, 0)
        self.clear_search()
        log_event(logger, "navigate", kind="enter", path=entry.path)

    def go_parent(self) -> None:
        departed = self.current_dir
        frame = self.history.pop_ascent()
        if frame is not None:
            target = frame.path
            fallback = frame.cursor_hint
        else:
            parent = parent_directory(departed)
            if parent is None:
                return
            target = parent
            fallback = 0
        entries = self._load(target)
        self.history.record_jump(self._current_frame())
        self._install_listing(target, entries, relocate_cursor(entries, departed, fallback_hint=fallback))
        self.clear_search()
        log_event(logger, "navigate", kind="parent", path=target)

    def go_back(self) -> None:
        frame = self.history.pop_jump()
        if frame is None:
            return
        entries = self._load(frame.path)
        # Ascent frames only hold for the chain of enters that led here; a back
        # step leaves that chain, so parent falls back to locating by name.
        self.history.reset_ascent()
        self._install_listing(frame.path, entries, clamp_cursor(frame.cursor_hint, len(entries)))
        self.clear_search()
        log_event(logger, "navigate", kind="back", path=frame.path)

    def quick_jump(self, target: Path) -> None:
        if not is_navigable_directory(target):
            raise JumperError(code="jump_missing", message=f"Path does not exist: {target}")
        entries = self._load(target)
        self.history.record_jump(self._current_frame())
        # Same for quick jumps: the old ascent chain no longer leads to target.
        self.history.reset_ascent()
        self._install_listing(target, entries, 0)
        self.clear_search()
        log_event(logger, "navigate", kind="jump", path=target)

    # -- listing ---------------------------------------------------------------

    def _load(self, directory: Path) -> list[Entry]:
        entries = self._loader(directory, show_hidden=self.show_hidden)
        return sort_entries(entries, self.sort_by, descending=self.sort_descending)

    def _install_listing(self, directory: Path, entries: Sequence[Entry], cursor: int | None) -> None:
        self.current_dir = directory
        self.selection.set_entries(tuple(entries), cursor=cursor)
        self.size_cache.track(entry.path for entry in entries if entry.is_dir)

    def reload(self, *, cursor_path: Path | None = None) -> None:
        """Re-read the current directory, keeping the cursor on the same entry if possible."""
        previous = self.selection.cursor_entry()
        hint = self.selection.cursor or 0
        entries = self._load(self.current_dir)
        self._install_listing(self.current_dir, entries, hint)
        for path in (cursor_path, previous.path if previous else None):
            index = self.selection.index_of(path) if path is not None else None
            if index is not None:
                self.selection.cursor = index
                break
        if self.search.active:
            self._update_search(self.search.query, jump=False)

    def set_sort(self, sort_by: SortMode, *, descending: bool | None = None) -> None:
        self.sort_by = normalize_sort_mode(sort_by)
        if descending is not None:
            self.sort_descending = descending
        current = self.selection.cursor_entry()
        entries = sort_entries(
            self.selection.entries, self.sort_by, descending=self.sort_descending
        )
        self.selection.set_entries(tuple(entries), cursor=self.selection.cursor)
        if current is not None:
            index = self.selection.index_of(current.path)
            if index is not None:
                self.selection.cursor = index
        if self.search.active:
            self._update_search(self.search.query, jump=False)
        self.mode = NormalMode()

    # -- search ----------------------------------------------------------------

    def clear_search(self) -> None:
        self.search = SearchState()

    def _update_search(self, query: str, *, jump: bool = True) -> None:
        if not query:
            self.clear_search()
            return
        matches = search_names(query, [entry.name for entry in self.selection.entries])
        self.search = SearchState(query=query, matches=tuple(matches))
        if jump and matches:
            self.selection.move_to(matches[0].index)

    def _step_match(self, direction: int) -> None:
        indices = sorted(match.index for match in self.search.matches)
        if not indices:
            return
        cursor = self.selection.cursor if self.selection.cursor is not None else -1
        if direction > 0:
            following = [index for index in indices if index > cursor]
            target = following[0] if following else indices[0]
        else:
            preceding = [index for index in indices if index < cursor]
            target = preceding[-1] if preceding else indices[-1]
        self.selection.move_to(target)

    # -- file operations -------------------------------------------------------

    def _delete(self, targets: Sequence[Path]) -> None:
        result = self.file_ops.delete(targets)
        self.selection.clear_marks()
        self.reload()
        self._report_batch(result)

    def _confirm_create(self, buffer: str) -> None:
        name = buffer.strip()
        if not name:
            self.mode = NormalMode()
            return
        as_directory = name.endswith(("/", os.sep))
        relative = Path(name.rstrip("/" + os.sep))
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise JumperError(code="invalid_name", message=f"Invalid name '{name}'")
        target = self.current_dir / relative
        if as_directory:
            self.file_ops.create_directory(target)
        else:
            self.file_ops.create_file(target)
        self.mode = NormalMode()
        self.reload(cursor_path=self.current_dir / relative.parts[0])

    def _confirm_rename(self, target: Path, buffer: str) -> None:
        if not buffer.strip() or buffer == target.name:
            self.mode = NormalMode()
            return
        destination = self.file_ops.rename(target, buffer)
        self.mode = NormalMode()
        self.reload(cursor_path=destination)

    # -- messages & ticking ----------------------------------------------------

    def _report(self, error: BaseException) -> None:
        text, severity = format_error(error)
        self.message = StatusMessage(text, severity, self._clock() + self._message_seconds)
        log_failure(logger, "action_failed", error=text, path=self.current_dir)

    def _report_batch(self, result: BatchResult) -> None:
        severity = "information" if result.ok else "error"
        self._notify(result.summary(), severity=severity)

    def _notify(self, text: str, *, severity: Severity = "information") -> None:
        self.message = StatusMessage(text, severity, self._clock() + self._message_seconds)

    def tick(self) -> bool:
        """Per-frame housekeeping; returns True when anything visible changed."""
        now = self._clock()
        changed = False
        if self.message is not None and now >= self.message.expires_at:
            self.message = None
            changed = True
        if self.flash_paths and now >= self._flash_until:
            self.flash_paths = frozenset()
            changed = True
        if self.size_cache.poll():
            changed = True
        return changed

    def snapshot(self) -> BrowserSnapshot:
        return BrowserSnapshot(
            current_dir=self.current_dir,
            entries=tuple(self.selection.entries),
            cursor=self.selection.cursor,
            marked=self.selection.marked_indices(),
            mode=self.mode,
            search=self.search,
            clipboard=self.clipboard,
            sort_by=self.sort_by,
            sort_descending=self.sort_descending,
            show_hidden=self.show_hidden,
            sizes=self.size_cache.view(),
            flash_paths=self.flash_paths,
            message=self.message,
        )

    def close(self) -> None:
        self.size_cache.shutdown()
