# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git history queries used to resolve the last modification year of a path.

A :class:`GitRepository` is the handle on one repository root. Handles are
owned by a :class:`RepositoryCache` which the orchestration layer opens before
any file is processed and closes once every file operation has completed.
Queries are read-only and may be issued concurrently against the same handle.
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Final

from .errors import HistoryNotFoundError, RepositoryError
from .process import TIMEOUT_EXIT_CODE, CommandOptions, SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)

GIT_EXECUTABLE: Final[str] = "git"
# Paths are matched verbatim; names such as ``A[12].java`` are not globs.
LITERAL_PATHSPECS: Final[str] = "--literal-pathspecs"
GIT_TIMEOUT_SECONDS: Final[float] = 60.0
CURRENT_DIRECTORY_SENTINEL: Final[str] = "."
# Strict ISO-8601 committer date, keeps the committer's own UTC offset.
COMMIT_DATE_FORMAT: Final[str] = "--format=%cI"
# Reported by ``git log`` in a repository without any commit.
NO_COMMITS_MARKER: Final[str] = "does not have any commits"


def _git_options(cwd: Path, timeout: float) -> CommandOptions:
    return CommandOptions(cwd=cwd, env={**os.environ, "LC_ALL": "C"}, timeout=timeout)


class GitRepository:
    """Open handle on the git repository rooted at ``root``."""

    def __init__(self, root: Path, *, timeout: float = GIT_TIMEOUT_SECONDS) -> None:
        self._root = root.resolve()
        self._timeout = timeout
        self._closed = False
        self._years: dict[Path, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def open(cls, root: Path, *, timeout: float = GIT_TIMEOUT_SECONDS) -> GitRepository:
        """Return a handle on ``root`` after checking it is a repository top level.

        Args:
            root: Directory expected to be the top level of a git work tree.
            timeout: Seconds each git invocation may take.

        Returns:
            GitRepository: Handle ready for history queries.

        Raises:
            RepositoryError: If git is unavailable or ``root`` is not a
                repository top level.
        """

        resolved = root.resolve()
        if not resolved.is_dir():
            raise RepositoryError(resolved, "directory does not exist")
        try:
            completed = run_command(
                [GIT_EXECUTABLE, "rev-parse", "--show-toplevel"],
                options=_git_options(resolved, timeout),
            )
        except FileNotFoundError as exc:
            raise RepositoryError(resolved, "git executable not found") from exc
        except SubprocessExecutionError as exc:
            if exc.returncode == TIMEOUT_EXIT_CODE:
                raise RepositoryError(resolved, exc.stderr or "git timed out") from exc
            raise RepositoryError(resolved, "not a git repository") from exc

        toplevel = Path(completed.stdout.strip()).resolve()
        if toplevel != resolved:
            raise RepositoryError(resolved, f"not the repository root (root is {toplevel})")
        LOGGER.debug("Opened git repository at %s", resolved)
        return cls(resolved, timeout=timeout)

    @property
    def root(self) -> Path:
        """Return the resolved repository root."""

        return self._root

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""

        return self._closed

    def close(self) -> None:
        """Release the handle; later queries raise :class:`RepositoryError`."""

        self._closed = True
        with self._lock:
            self._years.clear()

    def modification_year(self, target: Path) -> int:
        """Return the year of the most recent commit touching ``target``.

        Args:
            target: File or directory inside the repository.

        Returns:
            int: Calendar year of the commit date, in the committer's timezone.

        Raises:
            RepositoryError: If the handle is closed, ``target`` lies outside
                the repository, or git fails.
            HistoryNotFoundError: If no commit touches ``target``.
        """

        if self._closed:
            raise RepositoryError(self._root, "handle is closed")
        key = target.resolve()
        with self._lock:
            cached = self._years.get(key)
        if cached is not None:
            return cached

        year = self._query_year(key)
        with self._lock:
            self._years[key] = year
        return year

    def _query_year(self, target: Path) -> int:
        """Run ``git log`` for ``target`` and parse the commit year."""

        pathspec = self._pathspec(target)
        try:
            completed = run_command(
                [GIT_EXECUTABLE, LITERAL_PATHSPECS, "log", "-1", COMMIT_DATE_FORMAT, "--", pathspec],
                options=_git_options(self._root, self._timeout),
            )
        except SubprocessExecutionError as exc:
            if exc.stderr and NO_COMMITS_MARKER in exc.stderr:
                raise HistoryNotFoundError(self._root, target) from exc
            raise RepositoryError(self._root, f"git log failed for {pathspec}: {exc.stderr or ''}".strip()) from exc

        stamp = completed.stdout.strip()
        if not stamp:
            raise HistoryNotFoundError(self._root, target)
        year = datetime.fromisoformat(stamp).year
        LOGGER.debug("Last change of %s in %s", pathspec, year)
        return year

    def _pathspec(self, target: Path) -> str:
        try:
            relative = target.relative_to(self._root)
        except ValueError as exc:
            raise RepositoryError(self._root, f"{target} is outside the repository") from exc
        rendered = relative.as_posix()
        return rendered if rendered not in ("", CURRENT_DIRECTORY_SENTINEL) else CURRENT_DIRECTORY_SENTINEL

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"GitRepository({str(self._root)!r}, {state})"


class RepositoryCache:
    """Map repository roots to open :class:`GitRepository` handles.

    The cache never evicts on its own. Its owner opens the handles it needs up
    front and calls :meth:`close_all` (or leaves the ``with`` block) after all
    per-file work has finished.
    """

    def __init__(self) -> None:
        self._handles: dict[Path, GitRepository] = {}
        self._lock = threading.Lock()

    def open(self, root: Path) -> GitRepository:
        """Return the handle for ``root``, opening it on first use.

        Args:
            root: Repository root directory.

        Returns:
            GitRepository: Cached handle for ``root``.

        Raises:
            RepositoryError: If the repository cannot be opened.
        """

        key = root.resolve()
        with self._lock:
            handle = self._handles.get(key)
            if handle is None or handle.closed:
                handle = GitRepository.open(key)
                self._handles[key] = handle
            return handle

    def __contains__(self, root: object) -> bool:
        if not isinstance(root, Path):
            return False
        with self._lock:
            return root.resolve() in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def close(self, root: Path) -> None:
        """Close and forget the handle for ``root`` when one is cached."""

        with self._lock:
            handle = self._handles.pop(root.resolve(), None)
        if handle is not None:
            handle.close()

    def close_all(self) -> None:
        """Close and forget every cached handle."""

        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            handle.close()

    def __enter__(self) -> RepositoryCache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close_all()


def get_modification_year(root_path: Path, target_path: Path, *, repositories: RepositoryCache) -> int:
    """Return the year of the last commit touching ``target_path``.

    Args:
        root_path: Repository root; must be the top level of a git work tree.
        target_path: File or directory whose history is inspected.
        repositories: Cache providing the handle for ``root_path``.

    Returns:
        int: Calendar year of the most recent matching commit.

    Raises:
        RepositoryError: If ``root_path`` is not a repository root.
        HistoryNotFoundError: If no commit touches ``target_path``.
    """

    target = target_path if target_path.is_absolute() else root_path / target_path
    return repositories.open(root_path).modification_year(Path(os.path.normpath(target)))


__all__ = ["GitRepository", "RepositoryCache", "get_modification_year"]
