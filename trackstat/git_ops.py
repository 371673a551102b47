"""Git subprocess operations."""

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from trackstat.models import DETACHED_BRANCH, ExecutionResult

logger = logging.getLogger(__name__)

REF_FORMAT = (
    "%(push:track,nobracket)::%(upstream:track,nobracket)"
    "::%(push)::%(upstream)::%(refname:short)"
)


class GitError(Exception):
    """Git command failed."""

    def __init__(self, cmd: Sequence[str], stderr: str) -> None:
        self.cmd = cmd
        self.stderr = stderr
        super().__init__(f"git {' '.join(cmd)}: {stderr}")


class Executor(Protocol):
    """Anything that can run a git command and report its output."""

    def execute(
        self, args: Sequence[str], output_encoding: str | None = None
    ) -> ExecutionResult: ...


class Executable:
    """Runs git commands in a fixed working directory."""

    def __init__(self, working_dir: Path, git_path: str = "git") -> None:
        self.working_dir = working_dir
        self.git_path = git_path

    def execute(
        self, args: Sequence[str], output_encoding: str | None = None
    ) -> ExecutionResult:
        """Run a git command without raising on a non-zero exit."""
        cmd = [self.git_path, *args]
        logger.debug("Running %s in %s", cmd, self.working_dir)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_dir,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding=output_encoding or "utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.debug("Could not start %s: %s", self.git_path, exc)
            return ExecutionResult(exited_successfully=False, standard_output="")
        if result.returncode != 0:
            logger.debug("git exited with %d: %s", result.returncode, result.stderr.strip())
        return ExecutionResult(
            exited_successfully=result.returncode == 0,
            standard_output=result.stdout,
        )


def build_ahead_behind_args(branch_name: str = "") -> list[str]:
    """Build the for-each-ref arguments for one branch, or all when empty."""
    return ["for-each-ref", f"--format={REF_FORMAT}", f"refs/heads/{branch_name}"]


def run(args: Sequence[str], cwd: Path | None = None) -> str:
    """Run a git command and return stdout."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise GitError(args, (exc.stderr or "").strip()) from exc
    except FileNotFoundError as exc:
        raise GitError(args, "git command not found") from exc
    return result.stdout.strip()


def try_run(args: Sequence[str], cwd: Path | None = None) -> str | None:
    """Run a git command, returning None on failure."""
    try:
        return run(args, cwd=cwd)
    except GitError:
        return None


def get_repo_root(cwd: Path | None = None) -> Path:
    """Get the top-level directory of the working tree."""
    return Path(run(["rev-parse", "--show-toplevel"], cwd=cwd)).resolve()


def current_branch(repo_root: Path) -> str:
    """Get the checked out branch, or the detached pseudo-branch."""
    branch = run(["branch", "--show-current"], cwd=repo_root)
    return branch or DETACHED_BRANCH


def list_local_branches(repo_root: Path) -> list[str]:
    """List all local branch names."""
    out = run(["for-each-ref", "--format=%(refname:short)", "refs/heads"], cwd=repo_root)
    return [line.strip() for line in out.splitlines() if line.strip()]
