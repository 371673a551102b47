"""Data models for trackstat."""

from dataclasses import dataclass

GONE = "gone"
"""Count value used when the remote-tracking ref no longer exists."""

DETACHED_BRANCH = "(no branch)"
"""Pseudo-branch name reported for a detached HEAD."""

ALL_BRANCHES = ""


@dataclass(frozen=True)
class AheadBehindData:
    """Ahead/behind counts of a local branch against its remote ref.

    Counts are kept as text: decimal digits, an empty string when the count is
    unknown or not applicable, or ``GONE`` when the remote ref was deleted.
    """

    branch: str
    remote_ref: str
    ahead_count: str
    behind_count: str

    @property
    def is_gone(self) -> bool:
        """Check if the remote ref of this branch is gone."""
        return self.ahead_count == GONE

    @property
    def ahead(self) -> int | None:
        return _to_int(self.ahead_count)

    @property
    def behind(self) -> int | None:
        return _to_int(self.behind_count)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running a git command."""

    exited_successfully: bool
    standard_output: str


def _to_int(count: str) -> int | None:
    return int(count) if count.isascii() and count.isdigit() else None
