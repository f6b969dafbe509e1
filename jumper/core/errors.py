from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

Severity = Literal["error", "warning", "information"]

@dataclass
class JumperError(Exception):
    code: str
    message: str
    detail: str | None = None
    severity: Severity = "error"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class AlreadyExistsError(JumperError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            code="already_exists",
            message=f"'{path.name}' already exists",
            detail=str(path),
        )
        self.path = path


class NotFoundError(JumperError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            code="not_found",
            message=f"'{path.name}' no longer exists",
            detail=str(path),
        )
        self.path = path


class NoUniqueDestinationError(JumperError):
    def __init__(self, directory: Path, name: str, attempts: int) -> None:
        super().__init__(
            code="no_unique_destination",
            message=f"No free name for '{name}' after {attempts} attempts",
            detail=str(directory),
        )
        self.directory = directory
        self.name = name


class DirectoryReadError(JumperError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            code="directory_read",
            message=f"Cannot read {path}",
            detail=reason,
        )
        self.path = path


class OpenFailedError(JumperError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            code="open_failed",
            message=f"Cannot open '{path.name}'",
            detail=reason,
        )
        self.path = path


class StartupError(JumperError):
    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="startup", message=message, detail=detail)


@dataclass
class BatchResult:
    """Per-item outcome of a copy, move or delete over several paths."""

    operation: str
    completed: list[tuple[Path, Path | None]] = field(default_factory=list)
    failures: list[tuple[Path, JumperError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def attempted(self) -> int:
        return len(self.completed) + len(self.failures)

    def summary(self) -> str:
        done = len(self.completed)
        if self.ok:
            return f"{self.operation}: {done} item(s) done"
        first_path, first_error = self.failures[0]
        return (
            f"{self.operation}: {done}/{self.attempted} done, "
            f"{len(self.failures)} failed ({first_path.name}: {first_error})"
        )


def format_error(error: BaseException) -> tuple[str, Severity]:
    if isinstance(error, JumperError):
        prefix = f"[{error.code}] " if error.code else ""
        return f"{prefix}{error}", error.severity
    return f"{error}", "error"


def wrap_error(
    error: BaseException,
    *,
    code: str,
    message: str,
    severity: Severity = "error",
) -> JumperError:
    if isinstance(error, JumperError):
        return error
    if isinstance(error, FileNotFoundError) and error.filename:
        return NotFoundError(Path(error.filename))
    if isinstance(error, FileExistsError) and error.filename:
        return AlreadyExistsError(Path(error.filename))
    detail = error.strerror if isinstance(error, OSError) and error.strerror else str(error)
    return JumperError(code=code, message=message, detail=detail, severity=severity)
