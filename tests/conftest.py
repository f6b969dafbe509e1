from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from jumper.core.controller import BrowserController
from jumper.core.keys import KeyEvent
from jumper.core.settings_model import SettingsModel
from jumper.core.size_cache import DirectorySizeCache


def run_inline(job) -> None:
    """Submitter that runs size walks immediately on the calling thread."""
    job()


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_tree(root: Path, *names: str) -> Path:
    """Create files and (trailing '/') directories under root."""
    for name in names:
        target = root / name
        if name.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(name, encoding="utf-8")
    return root


def send(controller: BrowserController, *keys: str) -> None:
    """Feed keys such as "j", "G", "escape" or "ctrl+o" to the controller."""
    for key in keys:
        if len(key) > 1 and "+" in key:
            *modifiers, base = key.split("+")
            controller.handle(KeyEvent.press(base, *modifiers))
        else:
            controller.handle(KeyEvent.press(key))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def inline_cache() -> DirectorySizeCache:
    return DirectorySizeCache(run_inline)


@pytest.fixture
def build_controller(clock, inline_cache):
    created: list[BrowserController] = []

    def factory(start: Path, settings: SettingsModel | None = None, **overrides) -> BrowserController:
        overrides.setdefault("opener", Mock())
        overrides.setdefault("clipboard_export", Mock(return_value=True))
        overrides.setdefault("clipboard_import", Mock(return_value=[]))
        controller = BrowserController(
            start,
            settings or SettingsModel(),
            size_cache=inline_cache,
            clock=clock,
            **overrides,
        )
        created.append(controller)
        return controller

    yield factory
    for controller in created:
        controller.close()
