from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from jumper.core.logging import get_logger, log_failure
from jumper.core.settings_model import SettingsModel

logger = get_logger("jumper.settings")


class SettingsStore:
    """Load and persist jumper user settings."""

    SCHEMA_VERSION = 1

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SettingsModel:
        """Read settings from disk, filling in missing sections with defaults."""
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                log_failure(logger, "settings_unreadable", path=self._path, error=str(exc))
                raw = {}
        else:
            raw = {}
        migrated = self._migrate(raw)
        model = self._normalize(migrated)
        normalized = model.model_dump()
        if self._should_persist_upgrade(raw, normalized):
            self._backup_raw_settings()
            try:
                self.save(model)
            except OSError as exc:
                log_failure(logger, "settings_save_failed", path=self._path, error=str(exc))
        return model

    def save(self, settings: SettingsModel) -> None:
        """Persist settings to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(settings.model_dump(), indent=4), encoding="utf-8"
        )

    def _normalize(self, data: dict[str, Any]) -> SettingsModel:
        try:
            return SettingsModel.model_validate(data or {})
        except ValidationError as exc:
            log_failure(logger, "settings_invalid", path=self._path, error=str(exc))
            return SettingsModel()

    def _migrate(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        version = data.get("schemaVersion")
        if not isinstance(version, int):
            version = 0
        if version < self.SCHEMA_VERSION:
            data = dict(data)
            data["schemaVersion"] = self.SCHEMA_VERSION
        return data

    def _should_persist_upgrade(self, raw: Any, normalized: dict[str, Any]) -> bool:
        if not isinstance(raw, dict):
            return True
        if raw.get("schemaVersion") != normalized.get("schemaVersion"):
            return True
        return raw != normalized

    def _backup_raw_settings(self) -> None:
        if not self._path.exists():
            return
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        backup_path = self._path.with_name(f"{self._path.stem}.bak-{timestamp}.json")
        try:
            backup_path.write_text(self._path.read_text(encoding="utf-8"), encoding="utf-8")
        except OSError as exc:
            log_failure(logger, "settings_backup_failed", path=backup_path, error=str(exc))
