from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widget import Widget

from jumper.core.settings_model import ColorScheme
from jumper.core.state import BrowserSnapshot, CutClipboard
from jumper.services.file_listing import Entry, format_size

SIZE_COLUMN_WIDTH = 10
PENDING_SIZE = "…"


def _truncate_row_value(value: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return f"{value[: width - 3]}..."


def visible_window(cursor: int | None, total: int, height: int) -> tuple[int, int]:
    """First and one-past-last row to draw so the cursor stays on screen."""
    if height <= 0 or total <= 0:
        return 0, 0
    if total <= height:
        return 0, total
    focus = cursor or 0
    start = max(0, min(focus - height // 2, total - height))
    return start, start + height


def entry_style(entry: Entry, colors: ColorScheme) -> Style:
    if entry.is_symlink:
        color = colors.symlink
    elif entry.is_dir:
        color = colors.directory
    elif entry.is_executable:
        color = colors.executable
    else:
        color = colors.file
    style = Style(color=color, bold=entry.is_dir)
    if entry.is_hidden:
        style += Style(dim=True)
    return style


def size_label(entry: Entry, snapshot: BrowserSnapshot) -> str:
    if not entry.is_dir:
        return format_size(entry.size)
    cached = snapshot.sizes.get(entry.path)
    if cached is None or cached.pending:
        return PENDING_SIZE
    return format_size(cached.size or 0)


def render_entry_row(
    entry: Entry,
    index: int,
    snapshot: BrowserSnapshot,
    colors: ColorScheme,
    *,
    width: int,
    positions: tuple[int, ...] = (),
) -> Text:
    is_cursor = index == snapshot.cursor
    is_marked = index in snapshot.marked
    cut = isinstance(snapshot.clipboard, CutClipboard) and entry.path in snapshot.clipboard.paths

    text = Text()
    if is_marked:
        text.append("✓ ", style=Style(color=colors.marked, bold=True))
    else:
        text.append("  ")

    name_width = max(1, width - SIZE_COLUMN_WIDTH - 3)
    label = _truncate_row_value(entry.display_name, name_width)
    name = Text(label.ljust(name_width), style=entry_style(entry, colors))
    for position in positions:
        if position < len(label):
            name.stylize(Style(color=colors.match, bold=True, underline=True), position, position + 1)
    if cut:
        name.stylize(Style(italic=True, dim=True))
    text.append_text(name)
    text.append(" ")
    text.append(size_label(entry, snapshot).rjust(SIZE_COLUMN_WIDTH), style=Style(dim=True))

    if is_cursor:
        text.stylize(Style(reverse=True, color=colors.selected))
    elif entry.path in snapshot.flash_paths:
        text.stylize(Style(bgcolor=colors.selected))
    return text


def render_listing(snapshot: BrowserSnapshot, colors: ColorScheme, *, width: int, height: int) -> Text:
    if not snapshot.entries:
        return Text("No files in this directory.", style=Style(dim=True))
    positions = snapshot.search.positions_by_index()
    start, end = visible_window(snapshot.cursor, len(snapshot.entries), height)
    rows = [
        render_entry_row(
            snapshot.entries[index],
            index,
            snapshot,
            colors,
            width=width,
            positions=positions.get(index, ()),
        )
        for index in range(start, end)
    ]
    return Text("\n").join(rows)


class BrowserView(Widget):
    """Directory listing drawn from the latest controller snapshot."""

    def __init__(self, colors: ColorScheme, **kwargs) -> None:
        super().__init__(**kwargs)
        self._colors = colors
        self._snapshot: BrowserSnapshot | None = None
        self.can_focus = False

    def show(self, snapshot: BrowserSnapshot) -> None:
        self._snapshot = snapshot
        self.border_title = str(snapshot.current_dir)
        if snapshot.search.active:
            self.border_subtitle = f"{len(snapshot.search.matches)} match(es)"
        else:
            self.border_subtitle = ""
        self.refresh()

    def render(self) -> Text:
        if self._snapshot is None:
            return Text("")
        return render_listing(
            self._snapshot,
            self._colors,
            width=self.content_size.width,
            height=self.content_size.height,
        )
