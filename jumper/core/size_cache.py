"""Asynchronous recursive directory sizes for the current listing."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue
from typing import Callable, Iterable, Mapping

from jumper.core.logging import get_logger, log_event

logger = get_logger("jumper.size_cache")

SizeJob = Callable[[], None]
Submitter = Callable[[SizeJob], object]


@dataclass(frozen=True, slots=True)
class SizeEntry:
    path: Path
    size: int | None = None

    @property
    def pending(self) -> bool:
        return self.size is None


@dataclass(frozen=True, slots=True)
class SizeResult:
    token: int
    path: Path
    size: int


def directory_size(root: Path, cancelled: Callable[[], bool] | None = None) -> int:
    """Sum file sizes below root without following symlinks; unreadable parts count as 0.

    ``cancelled`` is checked before each directory is read; once it returns
    True the walk stops and the partial total is returned.
    """
    total = 0
    stack = [root]
    while stack:
        if cancelled is not None and cancelled():
            break
        current = stack.pop()
        try:
            with os.scandir(current) as scan:
                for entry in scan:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(Path(entry.path))
                        else:
                            total += entry.stat(follow_symlinks=False).st_size
                    except OSError:
                        continue
        except OSError:
            continue
    return total


class DirectorySizeCache:
    """Dispatches one subtree walk per directory and serves results non-blockingly.

    Walks are handed to ``submit`` (a Textual thread worker in the app). Until a
    submitter is bound, walks for the current listing wait in a backlog. Workers
    only ever put results on a queue; the cache map itself is touched
    exclusively by the thread that calls ``track`` and ``poll``.
    """

    def __init__(self, submit: Submitter | None = None) -> None:
        self._submit = submit
        self._backlog: list[tuple[int, Path]] = []
        self._results: Queue[SizeResult] = Queue()
        self._entries: dict[Path, SizeEntry] = {}
        self._token = 0
        self._closed = threading.Event()

    def bind(self, submit: Submitter) -> None:
        """Start dispatching through ``submit``, flushing walks queued before binding."""
        self._submit = submit
        backlog, self._backlog = self._backlog, []
        for token, path in backlog:
            if token == self._token:
                self._dispatch(token, path)

    def track(self, directories: Iterable[Path]) -> int:
        """Replace the tracked set; results for anything dispatched earlier become stale."""
        self._token += 1
        token = self._token
        self._entries = {}
        self._backlog = []
        for path in directories:
            if path in self._entries:
                continue
            self._entries[path] = SizeEntry(path)
            self._dispatch(token, path)
        return token

    def _dispatch(self, token: int, path: Path) -> None:
        if self._closed.is_set():
            return
        if self._submit is None:
            self._backlog.append((token, path))
            return
        self._submit(lambda: self._compute(token, path))

    def _compute(self, token: int, path: Path) -> None:
        def cancelled() -> bool:
            return self._closed.is_set() or token != self._token

        if cancelled():
            return
        size = directory_size(path, cancelled)
        if cancelled():
            return
        self._results.put(SizeResult(token=token, path=path, size=size))

    def poll(self) -> list[Path]:
        """Drain completed results without waiting; return paths whose size changed."""
        updated: list[Path] = []
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            current = self._entries.get(result.path)
            if result.token != self._token or current is None:
                log_event(logger, "size_discarded", path=result.path)
                continue
            self._entries[result.path] = SizeEntry(result.path, result.size)
            updated.append(result.path)
        return updated

    def view(self) -> Mapping[Path, SizeEntry]:
        return dict(self._entries)

    def shutdown(self) -> None:
        """Abandon every walk; running ones stop at their next directory."""
        self._closed.set()
        self._backlog = []
