import pytest

from jumper.core.keys import (
    BindingTable,
    KeyDescriptor,
    KeyEvent,
    SequenceTable,
    build_quick_jump_table,
)


def test_descriptor_parsing_is_case_insensitive():
    assert KeyDescriptor.parse("Ctrl+O") == KeyDescriptor("o", frozenset({"ctrl"}))
    assert KeyDescriptor.parse("control+o") == KeyDescriptor.parse("ctrl+o")


def test_descriptor_named_and_plus_keys():
    assert KeyDescriptor.parse("space").key == " "
    assert KeyDescriptor.parse("ctrl++") == KeyDescriptor("+", frozenset({"ctrl"}))


def test_descriptor_without_key_is_rejected():
    with pytest.raises(ValueError):
        KeyDescriptor.parse("ctrl+")


def test_modifiers_must_match_exactly():
    descriptor = KeyDescriptor.parse("ctrl+o")
    assert descriptor.matches(KeyEvent.press("o", "ctrl"))
    assert not descriptor.matches(KeyEvent.press("o"))
    assert not descriptor.matches(KeyEvent.press("o", "ctrl", "alt"))


def test_uppercase_letter_implies_shift():
    event = KeyEvent.press("G")
    assert event.modifiers == frozenset({"shift"})
    assert KeyDescriptor.parse("shift+g").matches(event)
    assert not KeyDescriptor.parse("g").matches(event)


def test_from_textual_translates_characters_and_names():
    assert KeyEvent.from_textual("ctrl+o", None) == KeyEvent.press("o", "ctrl")
    assert KeyEvent.from_textual("question_mark", "?") == KeyEvent.press("?")
    assert KeyEvent.from_textual("space", " ").key == " "
    assert KeyEvent.from_textual("escape", None).key == "escape"
    assert KeyEvent.from_textual("N", "N") == KeyEvent.press("N")


def test_text_events_and_canonical_form():
    assert KeyEvent.press("a").is_text
    assert not KeyEvent.press("a", "ctrl").is_text
    assert not KeyEvent.press("enter").is_text
    assert KeyEvent.press("y").canonical == "y"
    assert KeyEvent.press("o", "ctrl").canonical == "ctrl+o"


def test_binding_table_accepts_comma_lists():
    table = BindingTable({"j,down": "cursor_down", ",": "comma"})
    assert table.action_for(KeyEvent.press("j")) == "cursor_down"
    assert table.action_for(KeyEvent.press("down")) == "cursor_down"
    assert table.action_for(KeyEvent.press(",")) == "comma"
    assert table.action_for(KeyEvent.press("k")) is None


def test_sequence_table_requires_previous_key():
    table = SequenceTable()
    table.add("yy", "copy")
    assert table.lookup(None, "y") is None
    assert table.lookup("y", "y") == "copy"
    assert table.lookup("x", "y") is None
    with pytest.raises(ValueError):
        table.add("yyy", "nope")


def test_quick_jump_table_expands_home(tmp_path):
    table = build_quick_jump_table({"gh": "~", "gt": str(tmp_path), "bad": "/x", "gx": ""})
    assert set(table) == {"gh", "gt"}
    assert table["gt"] == tmp_path
    assert "~" not in str(table["gh"])


def test_named_keys_press_like_textual_events():
    table = BindingTable({"space": "toggle_mark", "?": "help"})
    assert KeyEvent.press("space") == KeyEvent.from_textual("space", " ")
    assert table.action_for(KeyEvent.press("space")) == "toggle_mark"
    assert table.action_for(KeyEvent.press("question_mark")) == "help"
