from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Iterable

from jumper.core.errors import (
    AlreadyExistsError,
    BatchResult,
    JumperError,
    NoUniqueDestinationError,
    NotFoundError,
    wrap_error,
)
from jumper.core.logging import get_logger, log_event, log_failure

MAX_DESTINATION_ATTEMPTS = 9999

logger = get_logger("jumper.file_ops")


def _exists(path: Path) -> bool:
    return os.path.lexists(path)


def disambiguated_name(name: str, counter: int, *, is_directory: bool) -> str:
    """Insert ``" (n)"`` before the extension; directories take it at the end."""
    if is_directory:
        return f"{name} ({counter})"
    suffix = Path(name).suffix
    if suffix in ("", ".") or suffix == name:
        return f"{name} ({counter})"
    stem = name[: -len(suffix)]
    return f"{stem} ({counter}){suffix}"


def unique_destination(
    directory: Path,
    name: str,
    *,
    is_directory: bool,
    max_attempts: int = MAX_DESTINATION_ATTEMPTS,
) -> Path:
    candidate = directory / name
    if not _exists(candidate):
        return candidate
    for counter in range(1, max_attempts + 1):
        candidate = directory / disambiguated_name(
            name, counter, is_directory=is_directory
        )
        if not _exists(candidate):
            return candidate
    raise NoUniqueDestinationError(directory, name, max_attempts)


class FileOperationEngine:
    """Encapsulates file-system mutations on absolute paths.

    Batch operations attempt every item and collect per-item failures instead
    of stopping at the first error.
    """

    def __init__(self, *, max_attempts: int = MAX_DESTINATION_ATTEMPTS) -> None:
        self._max_attempts = max_attempts

    def copy(self, sources: Iterable[Path], destination_dir: Path) -> BatchResult:
        return self._run_batch("copy", sources, lambda source: self._copy_one(source, destination_dir))

    def move(self, sources: Iterable[Path], destination_dir: Path) -> BatchResult:
        return self._run_batch("move", sources, lambda source: self._move_one(source, destination_dir))

    def delete(self, targets: Iterable[Path]) -> BatchResult:
        return self._run_batch("delete", targets, self._delete_one)

    def create_file(self, target: Path) -> Path:
        if _exists(target):
            raise AlreadyExistsError(target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.touch(exist_ok=False)
        except FileExistsError as exc:
            raise AlreadyExistsError(target) from exc
        except OSError as exc:
            raise wrap_error(exc, code="create_failed", message=f"Cannot create '{target.name}'") from exc
        log_event(logger, "file_created", path=target)
        return target

    def create_directory(self, target: Path) -> Path:
        if _exists(target):
            raise AlreadyExistsError(target)
        try:
            target.mkdir(parents=True, exist_ok=False)
        except FileExistsError as exc:
            raise AlreadyExistsError(target) from exc
        except OSError as exc:
            raise wrap_error(exc, code="create_failed", message=f"Cannot create '{target.name}'") from exc
        log_event(logger, "directory_created", path=target)
        return target

    def rename(self, source: Path, new_name: str) -> Path:
        new_name = new_name.strip()
        if not new_name or new_name in (".", "..") or Path(new_name).name != new_name:
            raise JumperError(
                code="invalid_name",
                message=f"Invalid name '{new_name}'",
            )
        if not _exists(source):
            raise NotFoundError(source)
        destination = source.with_name(new_name)
        if destination == source:
            return destination
        if _exists(destination):
            raise AlreadyExistsError(destination)
        try:
            source.rename(destination)
        except OSError as exc:
            raise wrap_error(exc, code="rename_failed", message=f"Cannot rename '{source.name}'") from exc
        log_event(logger, "path_renamed", source=source, destination=destination)
        return destination

    def _run_batch(
        self,
        operation: str,
        sources: Iterable[Path],
        perform: Callable[[Path], Path | None],
    ) -> BatchResult:
        result = BatchResult(operation=operation)
        seen: set[Path] = set()
        for source in sources:
            if source in seen:
                continue
            seen.add(source)
            try:
                destination = perform(source)
            except (JumperError, OSError, shutil.Error) as exc:
                error = wrap_error(
                    exc, code=f"{operation}_failed", message=f"Cannot {operation} '{source.name}'"
                )
                result.failures.append((source, error))
                log_failure(logger, f"{operation}_failed", path=source, error=str(error))
                continue
            result.completed.append((source, destination))
            log_event(logger, f"{operation}_done", path=source, destination=destination)
        return result

    def _copy_one(self, source: Path, destination_dir: Path) -> Path:
        if not _exists(source):
            raise NotFoundError(source)
        is_directory = source.is_dir() and not source.is_symlink()
        if is_directory and _is_within(destination_dir, source):
            raise JumperError(
                code="copy_into_self",
                message=f"Cannot copy '{source.name}' into itself",
            )
        destination = unique_destination(
            destination_dir,
            source.name,
            is_directory=is_directory,
            max_attempts=self._max_attempts,
        )
        if is_directory:
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination, follow_symlinks=False)
        return destination

    def _move_one(self, source: Path, destination_dir: Path) -> Path:
        if not _exists(source):
            raise NotFoundError(source)
        if source.parent == destination_dir:
            return source
        is_directory = source.is_dir() and not source.is_symlink()
        if is_directory and _is_within(destination_dir, source):
            raise JumperError(
                code="move_into_self",
                message=f"Cannot move '{source.name}' into itself",
            )
        destination = unique_destination(
            destination_dir,
            source.name,
            is_directory=is_directory,
            max_attempts=self._max_attempts,
        )
        shutil.move(str(source), str(destination))
        return destination

    def _delete_one(self, target: Path) -> None:
        if not _exists(target):
            raise NotFoundError(target)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()


def _is_within(path: Path, ancestor: Path) -> bool:
    try:
        path.resolve().relative_to(ancestor.resolve())
    except (ValueError, OSError):
        return False
    return True
