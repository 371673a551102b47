"""Cached ahead/behind data for local branches."""

import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

from trackstat import git_ops
from trackstat.models import ALL_BRANCHES, DETACHED_BRANCH, AheadBehindData
from trackstat.parsing import parse_ahead_behind

logger = logging.getLogger(__name__)

T = TypeVar("T")

ResultSet = Mapping[str, AheadBehindData]


class SharedComputation(Generic[T]):
    """Runs a factory at most once and hands the result to every caller.

    Callers arriving while the factory runs block until it finishes. If the
    factory raises, the exception reaches the caller that ran it and the next
    caller tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def value(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    self._value = self._factory()
                    self._done = True
        return self._value  # type: ignore[return-value]


class AheadBehindDataProvider:
    """Provides ahead/behind counts per branch, cached per query scope.

    One generation of data is cached at a time. It covers either all local
    branches or the single branch it was first requested for.
    """

    def __init__(
        self,
        get_executable: Callable[[], git_ops.Executor | None],
        is_enabled: Callable[[], bool] = lambda: True,
    ) -> None:
        self._get_executable = get_executable
        self._is_enabled = is_enabled
        self._lock = threading.Lock()
        self._computation: SharedComputation[ResultSet | None] | None = None
        self._branch_name: str | None = None

    @property
    def cached_scope(self) -> str | None:
        """Scope of the cached generation: "" for all branches, None if empty."""
        return self._branch_name

    def reset_cache(self) -> None:
        with self._lock:
            self._reset()

    def _reset(self) -> None:
        self._computation = None
        self._branch_name = None

    def get_data(self, branch_name: str = ALL_BRANCHES) -> ResultSet | None:
        """Get ahead/behind data for one branch, or all branches when empty.

        Callers passing a branch name are responsible for knowing that data
        for the other branches is not needed; a cached generation of any scope
        is reused for them.
        """
        if not self._is_enabled():
            return None

        with self._lock:
            if not branch_name.strip() and self._branch_name:
                logger.debug(
                    "Call for all branches after cache filled with specific branch %s",
                    self._branch_name,
                )
                self._reset()

            if self._computation is None:
                logger.debug("Ahead/behind cache miss for %r", branch_name)
                self._computation = SharedComputation(lambda: self.fetch(branch_name))
                self._branch_name = branch_name
            computation = self._computation

        data = computation.value
        if data is None:
            with self._lock:
                if self._computation is computation:
                    self._reset()
        return data

    def fetch(self, branch_name: str = ALL_BRANCHES, encoding: str | None = None) -> ResultSet | None:
        """Query git and parse the result without touching the cache."""
        if branch_name is None:
            raise ValueError("branch_name must not be None")

        if branch_name == DETACHED_BRANCH:
            return None

        result = self._executable().execute(
            git_ops.build_ahead_behind_args(branch_name), output_encoding=encoding
        )
        if not result.exited_successfully or not result.standard_output:
            return None

        return MappingProxyType(parse_ahead_behind(result.standard_output))

    def _executable(self) -> git_ops.Executor:
        executable = self._get_executable()
        if executable is None or not callable(getattr(executable, "execute", None)):
            raise ValueError("Require a valid executable to run git")
        return executable
