from __future__ import annotations

from pathlib import Path

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical

from jumper import __version__
from jumper.core.config import (
    get_runtime_config,
    resolve_lastdir_path,
    resolve_settings_path,
)
from jumper.core.controller import BrowserController
from jumper.core.errors import StartupError
from jumper.core.keys import KeyEvent
from jumper.core.logging import configure_logging, get_logger, log_event, log_failure
from jumper.core.settings_model import SettingsModel
from jumper.core.settings_store import SettingsStore
from jumper.core.size_cache import SizeJob
from jumper.core.state import HelpOverlayMode
from jumper.widgets import BrowserView, HelpPanel, StatusBar

logger = get_logger("jumper.app")

TICK_INTERVAL = 1 / 60


def resolve_start_path(start_path: Path | None) -> Path:
    if start_path is None:
        try:
            return Path.cwd()
        except OSError as exc:
            raise StartupError("Cannot determine the working directory", str(exc)) from exc
    candidate = start_path.expanduser()
    if not candidate.is_dir():
        raise StartupError(f"Not a directory: {candidate}")
    return candidate.absolute()


def record_last_directory(directory: Path, target: Path | None = None) -> Path | None:
    """Write the final directory so a shell wrapper can cd into it."""
    target = target or resolve_lastdir_path()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{directory}\n", encoding="utf-8")
    except OSError as exc:
        log_failure(logger, "lastdir_write_failed", path=target, error=str(exc))
        return None
    return target


class Jumper(App):
    TITLE = "jumper"
    CSS_PATH = Path(__file__).parent / "styles" / "jumper.tcss"
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, controller: BrowserController, settings: SettingsModel) -> None:
        super().__init__()
        self.controller = controller
        self.settings = settings

    def compose(self) -> ComposeResult:
        with Vertical(id="app_main_container"):
            yield BrowserView(self.settings.colors, id="browser_view")
            yield HelpPanel(id="help_panel")
            yield StatusBar(id="status_bar")

    def on_mount(self) -> None:
        self.title = f"{self.TITLE} v{__version__}"
        self.controller.size_cache.bind(self._run_size_job)
        self.set_interval(TICK_INTERVAL, self._on_tick)
        self._render_snapshot()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.controller.handle(KeyEvent.from_textual(event.key, event.character))
        if self.controller.should_quit:
            self.exit(self.controller.current_dir)
            return
        self._render_snapshot()

    def _run_size_job(self, job: SizeJob) -> None:
        self.run_worker(job, group="directory_size", thread=True, exit_on_error=False)

    def _on_tick(self) -> None:
        if self.controller.tick():
            self._render_snapshot()

    def _render_snapshot(self) -> None:
        snapshot = self.controller.snapshot()
        self.query_one(BrowserView).show(snapshot)
        self.query_one(StatusBar).show(snapshot)
        self.query_one(HelpPanel).display = isinstance(snapshot.mode, HelpOverlayMode)

    def on_unmount(self) -> None:
        self.controller.close()


def build_controller(start_path: Path | None = None) -> tuple[BrowserController, SettingsModel]:
    settings = SettingsStore(resolve_settings_path()).load()
    controller = BrowserController(resolve_start_path(start_path), settings)
    return controller, settings


def main(start_path: Path | None = None) -> Path:
    runtime = get_runtime_config()
    configure_logging(level=runtime.log_level, format_name=runtime.log_format, log_dir=runtime.log_dir)
    controller, settings = build_controller(start_path)
    log_event(logger, "startup", path=controller.current_dir, version=__version__)
    app = Jumper(controller, settings)
    final = app.run() or controller.current_dir
    record_last_directory(final)
    log_event(logger, "shutdown", path=final)
    return final
