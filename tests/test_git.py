# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for repository handles and the handle cache."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pylicenser.errors import HistoryNotFoundError, RepositoryError
from pylicenser.git import GitRepository, RepositoryCache, get_modification_year
from pylicenser.process import TIMEOUT_EXIT_CODE, CommandOptions, SubprocessExecutionError

if TYPE_CHECKING:
    from conftest import GitRepo


def test_open_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(RepositoryError, match="directory does not exist"):
        GitRepository.open(tmp_path / "missing")


def test_open_rejects_subdirectory(repo: GitRepo) -> None:
    (repo.root / "sub").mkdir()

    with pytest.raises(RepositoryError, match="not the repository root"):
        GitRepository.open(repo.root / "sub")


def test_file_and_directory_years(repo: GitRepo) -> None:
    repo.write("mod/Old.java", "class Old {}\n")
    repo.commit(year=2018)
    repo.write("mod/New.java", "class New {}\n")
    repo.commit("mod/New.java", year=2022)

    handle = GitRepository.open(repo.root)

    assert handle.modification_year(repo.root / "mod" / "Old.java") == 2018
    assert handle.modification_year(repo.root / "mod" / "New.java") == 2022
    assert handle.modification_year(repo.root / "mod") == 2022
    assert handle.modification_year(repo.root) == 2022


def test_year_uses_committer_timezone(repo: GitRepo) -> None:
    path = repo.write("A.java", "class A {}\n")
    stamp = "2020-12-31T23:30:00-05:00"
    repo.git("add", ".")
    repo.git(
        "commit",
        "-q",
        "-m",
        "late",
        env={**os.environ, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp},
    )

    assert GitRepository.open(repo.root).modification_year(path) == 2020


def test_untracked_file_has_no_history(repo: GitRepo) -> None:
    repo.write("A.java", "class A {}\n")
    repo.commit(year=2020)
    untracked = repo.write("B.java", "class B {}\n")

    with pytest.raises(HistoryNotFoundError):
        GitRepository.open(repo.root).modification_year(untracked)


def test_repository_without_commits_has_no_history(repo: GitRepo) -> None:
    path = repo.write("A.java", "class A {}\n")

    with pytest.raises(HistoryNotFoundError):
        GitRepository.open(repo.root).modification_year(path)


def test_target_outside_repository_is_rejected(repo: GitRepo, tmp_path: Path) -> None:
    repo.write("A.java", "class A {}\n")
    repo.commit(year=2020)

    with pytest.raises(RepositoryError, match="outside the repository"):
        GitRepository.open(repo.root).modification_year(tmp_path / "elsewhere.java")


def test_closed_handle_rejects_queries(repo: GitRepo) -> None:
    path = repo.write("A.java", "class A {}\n")
    repo.commit(year=2020)
    handle = GitRepository.open(repo.root)
    handle.close()

    assert handle.closed
    with pytest.raises(RepositoryError, match="handle is closed"):
        handle.modification_year(path)


def test_cache_reuses_and_closes_handles(make_repo: Callable[[str], GitRepo]) -> None:
    first = make_repo("first")
    second = make_repo("second")

    with RepositoryCache() as repositories:
        handle = repositories.open(first.root)
        assert repositories.open(first.root) is handle
        repositories.open(second.root)
        assert first.root in repositories
        assert len(repositories) == 2

        repositories.close(second.root)
        assert second.root not in repositories

    assert handle.closed
    assert len(repositories) == 0


def test_cache_reopens_closed_handle(repo: GitRepo) -> None:
    repositories = RepositoryCache()
    handle = repositories.open(repo.root)
    handle.close()

    reopened = repositories.open(repo.root)

    assert reopened is not handle
    assert not reopened.closed
    repositories.close_all()


def test_get_modification_year_accepts_relative_target(repo: GitRepo) -> None:
    repo.write("mod/A.java", "class A {}\n")
    repo.commit(year=2017)

    with RepositoryCache() as repositories:
        year = get_modification_year(repo.root, Path("mod/A.java"), repositories=repositories)

    assert year == 2017


def test_glob_characters_in_file_name_are_literal(repo: GitRepo) -> None:
    bracketed = repo.write("mod/A[12].java", "class A12 {}\n")
    repo.commit(year=2015)
    repo.write("mod/A1.java", "class A1 {}\n")
    repo.commit("mod/A1.java", year=2022)

    assert GitRepository.open(repo.root).modification_year(bracketed) == 2015


def test_untracked_star_file_does_not_borrow_sibling_history(repo: GitRepo) -> None:
    repo.write("mod/Other.java", "class Other {}\n")
    repo.commit(year=2023)
    starred = repo.write("mod/*.java", "class Star {}\n")

    with pytest.raises(HistoryNotFoundError):
        GitRepository.open(repo.root).modification_year(starred)


def test_history_query_timeout_is_a_repository_error(repo: GitRepo, monkeypatch: pytest.MonkeyPatch) -> None:
    path = repo.write("A.java", "class A {}\n")
    repo.commit(year=2020)
    handle = GitRepository.open(repo.root, timeout=5.0)
    timeouts: list[float | None] = []

    def _timed_out(args: list[str], *, options: CommandOptions) -> None:
        timeouts.append(options.timeout)
        raise SubprocessExecutionError(args, TIMEOUT_EXIT_CODE, "", "Command timed out after 5.0s")

    monkeypatch.setattr("pylicenser.git.run_command", _timed_out)

    with pytest.raises(RepositoryError, match="timed out"):
        handle.modification_year(path)
    assert timeouts == [5.0]
