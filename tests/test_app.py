from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from jumper.app import Jumper, record_last_directory, resolve_start_path
from jumper.core.errors import StartupError
from jumper.core.settings_model import SettingsModel


def test_resolve_start_path_defaults_to_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert resolve_start_path(None) == Path.cwd()


def test_resolve_start_path_rejects_files(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(StartupError):
        resolve_start_path(target)


def test_resolve_start_path_makes_absolute(tmp_path, monkeypatch):
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    assert resolve_start_path(Path("sub")) == Path.cwd() / "sub"


def test_record_last_directory_writes_path(tmp_path):
    target = tmp_path / "cache" / "lastdir"
    assert record_last_directory(Path("/some/where"), target) == target
    assert target.read_text(encoding="utf-8").strip() == str(Path("/some/where"))


def test_size_walks_run_as_textual_thread_workers():
    app = Jumper(Mock(), SettingsModel())
    job = Mock()
    with patch.object(Jumper, "run_worker") as run_worker:
        app._run_size_job(job)
    run_worker.assert_called_once_with(job, group="directory_size", thread=True, exit_on_error=False)
