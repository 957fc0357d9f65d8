# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run header validation or formatting over many files in parallel."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from .errors import LicenseError
from .filesystem import display_relative_path
from .git import RepositoryCache
from .license import LicenseHeader
from .logging import fail, info, ok, warn
from .process import SubprocessExecutionError

LOGGER = logging.getLogger(__name__)

# One file failing with any of these is reported and the run goes on.
FILE_ERRORS: tuple[type[Exception], ...] = (OSError, ValueError, LicenseError, SubprocessExecutionError)


@dataclass(slots=True)
class FileFailure:
    """A file whose operation raised instead of producing a verdict."""

    path: Path
    error: str


@dataclass(slots=True)
class _RunResult:
    total: int = 0
    failed: list[FileFailure] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def register_failure(self, path: Path, exc: BaseException) -> None:
        """Record that the operation on ``path`` raised ``exc``."""

        with self._lock:
            self.failed.append(FileFailure(path=path, error=str(exc)))


@dataclass(slots=True)
class ApplyResult(_RunResult):
    """Outcome of formatting a batch of files."""

    updated: list[Path] = field(default_factory=list)

    def register_updated(self, path: Path) -> None:
        """Record that ``path`` was rewritten."""

        with self._lock:
            self.updated.append(path)


@dataclass(slots=True)
class CheckResult(_RunResult):
    """Outcome of validating a batch of files."""

    invalid: list[Path] = field(default_factory=list)

    def register_invalid(self, path: Path) -> None:
        """Record that ``path`` lacks a valid header."""

        with self._lock:
            self.invalid.append(path)

    def __bool__(self) -> bool:
        """Return ``True`` when every file carries a valid header."""

        return not (self.invalid or self.failed)


def _run_parallel(
    files: Sequence[Path],
    operation: Callable[[Path], bool],
    *,
    jobs: int,
    on_result: Callable[[Path, bool], None],
    on_failure: Callable[[Path, BaseException], None],
) -> None:
    """Run ``operation`` for every file on a bounded pool, in completion order."""

    with ThreadPoolExecutor(max_workers=max(1, jobs)) as executor:
        future_map = {executor.submit(operation, path): path for path in files}
        for future in as_completed(future_map):
            path = future_map[future]
            try:
                outcome = future.result()
            except FILE_ERRORS as exc:
                LOGGER.debug("License operation failed for %s", path, exc_info=exc)
                on_failure(path, exc)
                continue
            on_result(path, outcome)


def apply_licenses(
    files: Sequence[Path],
    header: LicenseHeader,
    *,
    root_path: Path,
    project_path: Path,
    backup_folder: Path,
    jobs: int = 1,
    repositories: RepositoryCache | None = None,
    use_emoji: bool = True,
) -> ApplyResult:
    """Format ``files`` so that each carries the header its rule requires.

    The repository handle for ``root_path`` is opened before any file is
    processed; failing to open it aborts the run. A cache passed by the caller
    stays open afterwards, otherwise the handle is closed once all files are
    done.

    Args:
        files: Candidate source files.
        header: Rule set to apply.
        root_path: Repository root.
        project_path: Project owning ``files``.
        backup_folder: Root of the backup tree.
        jobs: Worker count.
        repositories: Optional externally owned handle cache.
        use_emoji: Whether console output may include emoji.

    Returns:
        ApplyResult: Updated and failed files together with the total.

    Raises:
        RepositoryError: If the repository at ``root_path`` cannot be opened.
    """

    result = ApplyResult(total=len(files))
    if not header.is_valid():
        warn("No license rules configured; skipping header formatting", use_emoji=use_emoji)
        return result

    cache = repositories if repositories is not None else RepositoryCache()
    try:
        cache.open(root_path)
        operation = partial(
            _format_one,
            header=header,
            root_path=root_path,
            project_path=project_path,
            backup_folder=backup_folder,
            repositories=cache,
        )
        _run_parallel(
            files,
            operation,
            jobs=jobs,
            on_result=lambda path, changed: result.register_updated(path) if changed else None,
            on_failure=result.register_failure,
        )
    finally:
        if repositories is None:
            cache.close_all()

    result.updated.sort()
    for path in result.updated:
        info(f" - Updated file {display_relative_path(path, project_path)}", use_emoji=False)
    for failure in sorted(result.failed, key=lambda entry: entry.path):
        fail(f"Failed to license {display_relative_path(failure.path, project_path)}: {failure.error}", use_emoji=use_emoji)
    ok(f"Updated {len(result.updated)} out of {result.total} files.", use_emoji=use_emoji)
    return result


def _format_one(
    path: Path,
    *,
    header: LicenseHeader,
    root_path: Path,
    project_path: Path,
    backup_folder: Path,
    repositories: RepositoryCache,
) -> bool:
    return header.format(path, root_path, project_path, backup_folder, repositories=repositories)


def check_licenses(
    files: Sequence[Path],
    header: LicenseHeader,
    *,
    project_path: Path,
    jobs: int = 1,
    use_emoji: bool = True,
) -> CheckResult:
    """Validate the header of every file in ``files``.

    Args:
        files: Candidate source files.
        header: Rule set to validate against.
        project_path: Project used to display relative paths.
        jobs: Worker count.
        use_emoji: Whether console output may include emoji.

    Returns:
        CheckResult: Invalid and failed files together with the total.
    """

    result = CheckResult(total=len(files))
    if not header.is_valid():
        warn("No license rules configured; skipping header validation", use_emoji=use_emoji)
        return result

    _run_parallel(
        files,
        header.validate,
        jobs=jobs,
        on_result=lambda path, valid: None if valid else result.register_invalid(path),
        on_failure=result.register_failure,
    )

    result.invalid.sort()
    for path in result.invalid:
        warn(f"Missing or invalid license header: {display_relative_path(path, project_path)}", use_emoji=use_emoji)
    for failure in sorted(result.failed, key=lambda entry: entry.path):
        fail(f"Failed to check {display_relative_path(failure.path, project_path)}: {failure.error}", use_emoji=use_emoji)
    if result:
        ok(f"All {result.total} files have valid license headers.", use_emoji=use_emoji)
    else:
        fail(
            f"{len(result.invalid) + len(result.failed)} out of {result.total} files have invalid headers.",
            use_emoji=use_emoji,
        )
    return result


__all__ = ["ApplyResult", "CheckResult", "FileFailure", "apply_licenses", "check_licenses"]
