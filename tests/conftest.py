# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest


@dataclass(slots=True)
class GitRepo:
    """Temporary git repository whose commit dates are pinned by the test."""

    root: Path

    def git(self, *args: str, env: dict[str, str] | None = None) -> None:
        subprocess.run(
            ["git", *args],
            cwd=self.root,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            env=env,
        )

    def write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def commit(self, *relatives: str, year: int, message: str = "change") -> None:
        stamp = f"{year}-06-15T12:00:00+00:00"
        env = {**os.environ, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}
        self.git("add", *(relatives or (".",)))
        self.git("commit", "-q", "-m", message, env=env)


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[str], GitRepo]:
    """Return a factory creating initialised git repositories under ``tmp_path``."""

    if shutil.which("git") is None:
        pytest.skip("git executable is required")

    def _make(name: str = "repo") -> GitRepo:
        root = tmp_path / name
        root.mkdir()
        repo = GitRepo(root=root.resolve())
        repo.git("init", "-q")
        repo.git("config", "user.name", "LicenserTest")
        repo.git("config", "user.email", "licenser@example.com")
        repo.git("config", "commit.gpgsign", "false")
        return repo

    return _make


@pytest.fixture
def repo(make_repo: Callable[[str], GitRepo]) -> GitRepo:
    """Return an empty git repository."""

    return make_repo("repo")
