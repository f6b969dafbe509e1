from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from jumper.core.state import (
    BrowserSnapshot,
    CreateInputMode,
    DeleteConfirmMode,
    MarkingMode,
    RenameInputMode,
    SearchMode,
    SortMenuMode,
)
from jumper.services.file_listing import SORT_MODE_LABELS

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "yellow",
    "information": "green",
}


def prompt_line(snapshot: BrowserSnapshot) -> str:
    mode = snapshot.mode
    if isinstance(mode, SearchMode):
        return f"/{snapshot.search.query}"
    if isinstance(mode, CreateInputMode):
        return f"New (end with / for a directory): {mode.buffer}"
    if isinstance(mode, RenameInputMode):
        return f"Rename {mode.target.name}: {mode.buffer}"
    if isinstance(mode, DeleteConfirmMode):
        count = len(mode.targets)
        noun = mode.targets[0].name if count == 1 else f"{count} items"
        return f"Delete {noun}? (y/n)"
    if isinstance(mode, SortMenuMode):
        return "Sort by: [n]ame [s]ize [m]odified [r]everse"
    if isinstance(mode, MarkingMode):
        return "-- MARKING --  y copy  x cut  d delete  enter keep  esc cancel"
    return ""


def status_line(snapshot: BrowserSnapshot) -> Text:
    text = Text()
    prompt = prompt_line(snapshot)
    if snapshot.message is not None:
        text.append(snapshot.message.text, style=SEVERITY_STYLES.get(snapshot.message.severity, ""))
    elif prompt:
        text.append(prompt, style="bold")
    else:
        total = len(snapshot.entries)
        position = (snapshot.cursor or 0) + 1 if total else 0
        text.append(f"{position}/{total}", style="dim")

    details = [f"sort: {SORT_MODE_LABELS[snapshot.sort_by]}{' ↓' if snapshot.sort_descending else ''}"]
    if snapshot.show_hidden:
        details.append("hidden")
    if snapshot.marked:
        details.append(f"marked: {len(snapshot.marked)}")
    clipboard = snapshot.clipboard_summary()
    if clipboard:
        details.append(clipboard)
    text.append("  |  " + "  ".join(details), style="dim")
    return text


class StatusBar(Static):
    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.can_focus = False

    def show(self, snapshot: BrowserSnapshot) -> None:
        self.update(status_line(snapshot))
