from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SortSetting = Literal["name", "size", "modified"]


def _default_quick_jumps() -> dict[str, str]:
    return {
        "gh": "~",
        "gd": "~/Downloads",
        "gp": "~/Projects",
    }


class ColorScheme(BaseModel):
    model_config = ConfigDict(extra="allow")

    directory: str = "blue"
    file: str = "white"
    selected: str = "green"
    hidden: str = "bright_black"
    symlink: str = "cyan"
    executable: str = "red"
    marked: str = "yellow"
    match: str = "magenta"


class KeyBindingSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    quick_jumps: dict[str, str] = Field(default_factory=_default_quick_jumps)
    history_back: str = "ctrl+o"

    @field_validator("quick_jumps")
    @classmethod
    def _two_key_sequences(cls, value: dict[str, str]) -> dict[str, str]:
        return {key: path for key, path in value.items() if len(key) == 2 and path}


class BehaviorSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    show_hidden: bool = False
    default_sort: SortSetting = "name"
    delete_confirmation: bool = True
    flash_duration_ms: int = Field(default=150, ge=0)
    message_duration_ms: int = Field(default=3000, ge=0)


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    schemaVersion: int = 1
    colors: ColorScheme = Field(default_factory=ColorScheme)
    keybindings: KeyBindingSettings = Field(default_factory=KeyBindingSettings)
    behavior: BehaviorSettings = Field(default_factory=BehaviorSettings)
