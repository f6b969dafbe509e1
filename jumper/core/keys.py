"""Key events, configurable key descriptors and the parsed binding tables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

MODIFIER_ALIASES: dict[str, str] = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "shift": "shift",
    "alt": "alt",
    "meta": "alt",
}

# Textual names for printable keys that arrive without a character.
_NAMED_CHARACTERS: dict[str, str] = {
    "space": " ",
    "question_mark": "?",
    "slash": "/",
    "full_stop": ".",
    "comma": ",",
    "tilde": "~",
}


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key press: a single character (case preserved) or a named key."""

    key: str
    modifiers: frozenset[str] = frozenset()

    @classmethod
    def press(cls, key: str, *modifiers: str) -> KeyEvent:
        mods = {MODIFIER_ALIASES.get(name, name) for name in modifiers}
        key = _NAMED_CHARACTERS.get(key, key)
        if len(key) == 1 and key.isalpha() and key.isupper():
            mods.add("shift")
        return cls(key=key, modifiers=frozenset(mods))

    @classmethod
    def from_textual(cls, key: str, character: str | None = None) -> KeyEvent:
        """Translate Textual's ``Key.key``/``Key.character`` pair."""
        parts = key.split("+")
        base = parts[-1]
        modifiers = [MODIFIER_ALIASES[part] for part in parts[:-1] if part in MODIFIER_ALIASES]
        if character and len(character) == 1 and character.isprintable() and "ctrl" not in modifiers:
            base = character
            if "shift" in modifiers and not character.isalpha():
                modifiers.remove("shift")
        else:
            base = _NAMED_CHARACTERS.get(base, base)
        return cls.press(base, *modifiers)

    @property
    def char(self) -> str | None:
        return self.key if len(self.key) == 1 else None

    @property
    def is_text(self) -> bool:
        """Printable input for text buffers (no ctrl/alt)."""
        return self.char is not None and not (self.modifiers & {"ctrl", "alt"})

    @property
    def canonical(self) -> str:
        if self.is_text:
            return self.key
        mods = "+".join(sorted(self.modifiers))
        return f"{mods}+{self.key.lower()}" if mods else self.key.lower()


@dataclass(frozen=True, slots=True)
class KeyDescriptor:
    """A key (character or name) plus the exact set of modifiers required."""

    key: str
    modifiers: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, text: str) -> KeyDescriptor:
        stripped = text.strip()
        parts = stripped.split("+")
        if stripped.endswith("++"):
            # "ctrl++" names the plus key itself
            parts = parts[:-2] + ["+"]
        modifiers: set[str] = set()
        key: str | None = None
        for part in parts:
            lowered = part.lower()
            if lowered in MODIFIER_ALIASES:
                modifiers.add(MODIFIER_ALIASES[lowered])
            elif part:
                key = _NAMED_CHARACTERS.get(lowered, lowered)
        if key is None:
            raise ValueError(f"Key descriptor '{text}' names no key")
        return cls(key=key, modifiers=frozenset(modifiers))

    @classmethod
    def for_event(cls, event: KeyEvent) -> KeyDescriptor:
        return cls(key=event.key.lower(), modifiers=event.modifiers)

    def matches(self, event: KeyEvent) -> bool:
        return self.key == event.key.lower() and self.modifiers == event.modifiers


class BindingTable:
    """Descriptor -> action name, parsed once from descriptor strings."""

    def __init__(self, bindings: Mapping[str, str] | None = None) -> None:
        self._actions: dict[KeyDescriptor, str] = {}
        for descriptor, action in (bindings or {}).items():
            self.bind(descriptor, action)

    def bind(self, descriptor: str | KeyDescriptor, action: str) -> None:
        if isinstance(descriptor, str):
            for text in _split_descriptor_list(descriptor):
                self._actions[KeyDescriptor.parse(text)] = action
            return
        self._actions[descriptor] = action

    def action_for(self, event: KeyEvent) -> str | None:
        return self._actions.get(KeyDescriptor.for_event(event))


def _split_descriptor_list(text: str) -> Iterable[str]:
    # "j,down" binds several keys; a lone "," is itself a key.
    if text == ",":
        return [text]
    return [item for item in text.split(",") if item] or [text]


class SequenceTable:
    """Two-key sequences keyed by (previous canonical key, current canonical key)."""

    def __init__(self) -> None:
        self._targets: dict[tuple[str, str], object] = {}

    def add(self, sequence: str, target: object) -> None:
        if len(sequence) != 2:
            raise ValueError(f"Sequence '{sequence}' must be exactly two keys")
        self._targets[(sequence[0], sequence[1])] = target

    def lookup(self, previous: str | None, current: str) -> object | None:
        if previous is None:
            return None
        return self._targets.get((previous, current))


def build_quick_jump_table(quick_jumps: Mapping[str, str]) -> dict[str, Path]:
    table: dict[str, Path] = {}
    for sequence, raw_path in quick_jumps.items():
        if len(sequence) != 2 or not raw_path:
            continue
        table[sequence] = Path(raw_path).expanduser()
    return table


DEFAULT_NORMAL_BINDINGS: dict[str, str] = {
    "q": "quit",
    "j,down": "cursor_down",
    "k,up": "cursor_up",
    "home": "cursor_top",
    "shift+g,end": "cursor_bottom",
    "ctrl+d,pagedown": "page_down",
    "ctrl+u,pageup": "page_up",
    "h,left,backspace": "go_parent",
    "l,right,enter": "open",
    ".": "toggle_hidden",
    "v,shift+v": "enter_marking",
    "space": "toggle_mark",
    "x": "cut",
    "p": "paste",
    "shift+y": "export_paths",
    "shift+p": "import_paths",
    "/": "search",
    "n": "next_match",
    "shift+n": "previous_match",
    "o": "sort_menu",
    "a": "create",
    "r": "rename",
    "d,delete": "delete",
    "?": "help",
    "escape": "clear",
}

DEFAULT_NORMAL_SEQUENCES: dict[str, str] = {
    "yy": "copy",
}
