from pathlib import Path, PurePosixPath

from jumper.core.history import (
    HistoryFrame,
    NavigationHistory,
    clamp_cursor,
    parent_directory,
    relocate_cursor,
)
from jumper.services.file_listing import Entry


def _entries(*names):
    return [Entry(name=name, path=Path("/base") / name, is_dir=True) for name in names]


def test_parent_of_root_is_none():
    assert parent_directory(PurePosixPath("/")) is None
    assert parent_directory(PurePosixPath("/home/user")) == PurePosixPath("/home")


def test_clamp_cursor():
    assert clamp_cursor(5, 0) is None
    assert clamp_cursor(5, 3) == 2
    assert clamp_cursor(-1, 3) == 0


def test_relocate_cursor_prefers_departed_name():
    entries = _entries("alpha", "beta", "gamma")
    assert relocate_cursor(entries, Path("/base/gamma"), fallback_hint=0) == 2


def test_relocate_cursor_falls_back_to_clamped_hint():
    entries = _entries("alpha", "beta")
    assert relocate_cursor(entries, Path("/base/renamed"), fallback_hint=7) == 1
    assert relocate_cursor([], Path("/base/renamed"), fallback_hint=3) is None


def test_enter_pushes_onto_both_stacks():
    history = NavigationHistory()
    frame = HistoryFrame(Path("/a"), 2)
    history.record_enter(frame)
    assert history.ascent == [frame]
    assert history.jumps == [frame]


def test_stacks_pop_independently():
    history = NavigationHistory()
    first = HistoryFrame(Path("/a"), 0)
    second = HistoryFrame(Path("/a/b"), 1)
    history.record_enter(first)
    history.record_enter(second)
    assert history.pop_ascent() == second
    history.record_jump(HistoryFrame(Path("/a/b/c"), 0))
    assert history.ascent[-1] == first
    assert history.pop_jump() == HistoryFrame(Path("/a/b/c"), 0)
    assert history.pop_jump() == second
    assert history.pop_jump() == first
    assert history.pop_jump() is None


def test_reset_ascent_keeps_jumps():
    history = NavigationHistory()
    history.record_enter(HistoryFrame(Path("/a"), 0))
    history.reset_ascent()
    assert history.pop_ascent() is None
    assert history.jumps == [HistoryFrame(Path("/a"), 0)]
