from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Static

_HELP_DATA_PATH = Path(__file__).resolve().parent.parent / "resources" / "key_help.json"


@dataclass(frozen=True)
class HelpRow:
    keys: str
    action: str


@dataclass(frozen=True)
class HelpSection:
    title: str
    rows: tuple[HelpRow, ...]


@dataclass(frozen=True)
class HelpDocument:
    intro: str
    sections: tuple[HelpSection, ...]


def load_help_document(path: Path = _HELP_DATA_PATH) -> HelpDocument:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        return HelpDocument(
            intro="Unable to load shortcut reference.",
            sections=(HelpSection(title="Error", rows=(HelpRow(keys=str(path), action=str(exc)),)),),
        )

    sections: list[HelpSection] = []
    for section_item in payload.get("sections", []):
        if not isinstance(section_item, dict):
            continue
        title = str(section_item.get("title", "")).strip()
        rows = tuple(
            HelpRow(
                keys=str(row.get("keys", "")).strip(),
                action=str(row.get("action", "")).strip(),
            )
            for row in section_item.get("rows", [])
            if isinstance(row, dict)
        )
        if title and rows:
            sections.append(HelpSection(title=title, rows=rows))

    intro = str(payload.get("intro", "")).strip() or "Press any key to close."
    return HelpDocument(intro=intro, sections=tuple(sections))


class HelpPanel(Vertical):
    """Keyboard reference shown while the help overlay mode is active."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._document = load_help_document()
        self.can_focus = False

    def compose(self) -> ComposeResult:
        yield Static(self._document.intro, classes="help_intro")
        for index, section in enumerate(self._document.sections):
            yield Static(section.title, classes="help_section_title")
            yield self._build_table(section.rows, index)

    def on_mount(self) -> None:
        self.border_title = "Keyboard Shortcuts"

    def _build_table(self, rows: tuple[HelpRow, ...], index: int) -> DataTable:
        table = DataTable(
            id=f"help_table_{index}",
            classes="help_table",
            show_cursor=False,
            zebra_stripes=True,
            disabled=True,
        )
        table.add_column("Keys", width=20)
        table.add_column("Action", width=48)
        table.add_rows([(row.keys, row.action) for row in rows])
        table.styles.height = len(rows) + 1
        return table
