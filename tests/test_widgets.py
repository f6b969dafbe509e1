from pathlib import Path

from jumper.core.settings_model import ColorScheme
from jumper.core.size_cache import SizeEntry
from jumper.core.state import (
    BrowserSnapshot,
    CutClipboard,
    DeleteConfirmMode,
    EmptyClipboard,
    NormalMode,
    SearchState,
    StatusMessage,
)
from jumper.services.file_listing import Entry
from jumper.services.fuzzy import FuzzyMatch
from jumper.widgets.browser_view import (
    PENDING_SIZE,
    render_entry_row,
    render_listing,
    size_label,
    visible_window,
)
from jumper.widgets.help_panel import load_help_document
from jumper.widgets.status_bar import prompt_line, status_line

BASE = Path("/base")


def _snapshot(**overrides):
    entries = (
        Entry(name="docs", path=BASE / "docs", is_dir=True),
        Entry(name="notes.txt", path=BASE / "notes.txt", is_dir=False, size=2048),
    )
    values = dict(
        current_dir=BASE,
        entries=entries,
        cursor=0,
        marked=frozenset(),
        mode=NormalMode(),
        search=SearchState(),
        clipboard=EmptyClipboard(),
        sort_by="name",
        sort_descending=False,
        show_hidden=False,
    )
    values.update(overrides)
    return BrowserSnapshot(**values)


def test_visible_window_keeps_cursor_on_screen():
    assert visible_window(None, 5, 10) == (0, 5)
    assert visible_window(50, 100, 10) == (45, 55)
    assert visible_window(99, 100, 10) == (90, 100)
    assert visible_window(0, 0, 10) == (0, 0)


def test_directory_size_shows_pending_marker_until_known():
    snapshot = _snapshot(sizes={BASE / "docs": SizeEntry(BASE / "docs")})
    assert size_label(snapshot.entries[0], snapshot) == PENDING_SIZE
    known = _snapshot(sizes={BASE / "docs": SizeEntry(BASE / "docs", 4096)})
    assert size_label(known.entries[0], known) == "4.00 KB"
    assert size_label(known.entries[1], known) == "2.00 KB"


def test_row_shows_mark_and_name():
    snapshot = _snapshot(marked=frozenset({1}))
    row = render_entry_row(snapshot.entries[1], 1, snapshot, ColorScheme(), width=40)
    assert row.plain.startswith("✓ notes.txt")
    plain = render_entry_row(snapshot.entries[0], 0, snapshot, ColorScheme(), width=40).plain
    assert plain.startswith("  docs/")


def test_listing_renders_every_visible_row():
    snapshot = _snapshot(
        search=SearchState(query="nt", matches=(FuzzyMatch(index=1, score=10, positions=(0, 6)),)),
        clipboard=CutClipboard((BASE / "notes.txt",)),
    )
    text = render_listing(snapshot, ColorScheme(), width=40, height=10)
    assert text.plain.count("\n") == 1


def test_empty_listing_message():
    text = render_listing(_snapshot(entries=(), cursor=None), ColorScheme(), width=40, height=10)
    assert "No files" in text.plain


def test_status_line_prefers_message_over_prompt():
    targets = (BASE / "a", BASE / "b")
    snapshot = _snapshot(mode=DeleteConfirmMode(targets=targets))
    assert prompt_line(snapshot) == "Delete 2 items? (y/n)"
    assert "Delete 2 items" in status_line(snapshot).plain
    with_message = _snapshot(message=StatusMessage("[not_found] gone", "error", 0.0))
    assert status_line(with_message).plain.startswith("[not_found] gone")


def test_help_document_loads_bundled_reference():
    document = load_help_document()
    assert document.sections
    assert any(row.keys == "yy" for section in document.sections for row in section.rows)


def test_help_document_reports_unreadable_file(tmp_path):
    document = load_help_document(tmp_path / "missing.json")
    assert document.sections[0].title == "Error"
