"""Pytest configuration."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

GIT_AVAILABLE = subprocess.run(["git", "--version"], capture_output=True).returncode == 0

requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git missing")


def _run(cmd: list[str], cwd: Path | None = None) -> None:
    subprocess.run(cmd, cwd=str(cwd) if cwd else None, check=True, capture_output=True)


def _commit(repo: Path, name: str) -> None:
    (repo / name).write_text(name)
    _run(["git", "add", name], cwd=repo)
    _run(["git", "commit", "-m", name], cwd=repo)


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", "/dev/null")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{var}_NAME", "Test")
        monkeypatch.setenv(f"{var}_EMAIL", "test@example.com")


@pytest.fixture
def run_git() -> Callable[..., None]:
    def run_git(*args: str, cwd: Path) -> None:
        _run(["git", *args], cwd=cwd)

    return run_git


@pytest.fixture
def repo(tmp_path: Path, git_env: None) -> Path:
    """A clone with branches in every tracking state.

    main is 2 ahead, synced is even, stale is 1 behind, removed lost its
    remote branch and local-only tracks nothing.
    """
    origin = tmp_path / "origin.git"
    work = tmp_path / "work"
    _run(["git", "init", "--bare", "-b", "main", str(origin)])
    _run(["git", "init", "-b", "main", str(work)])
    _run(["git", "remote", "add", "origin", str(origin)], cwd=work)
    _commit(work, "README.md")
    _run(["git", "push", "-u", "origin", "main"], cwd=work)

    _run(["git", "branch", "synced"], cwd=work)
    _run(["git", "push", "-u", "origin", "synced"], cwd=work)

    _run(["git", "switch", "-c", "stale"], cwd=work)
    _commit(work, "stale.txt")
    _run(["git", "push", "-u", "origin", "stale"], cwd=work)
    _run(["git", "reset", "--hard", "HEAD~1"], cwd=work)

    _run(["git", "switch", "-c", "removed", "main"], cwd=work)
    _run(["git", "push", "-u", "origin", "removed"], cwd=work)
    _run(["git", "push", "origin", "--delete", "removed"], cwd=work)

    _run(["git", "switch", "-c", "local-only", "main"], cwd=work)

    _run(["git", "switch", "main"], cwd=work)
    _commit(work, "one.txt")
    _commit(work, "two.txt")
    return work
