"""In-memory GitBackend with scripted answers, for tests."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from git import GitCommandError

from ..console import ConfirmFunc
from .backend import GitBackend


@dataclass
class FakeGitBackend(GitBackend):
    """
    Scripted stand-in for a git repository.

    ``counts`` maps a ``a..b`` range to the commit count git would report and
    ``logs`` maps a range to its one-line log. Setting one of the ``*_error``
    fields makes the matching call raise ``GitCommandError`` with that text
    as stderr. Every call is appended to ``calls``.
    """
    repository: bool = True
    branch: Optional[str] = "master"
    tracking: Optional[str] = "origin/master"
    dirty: bool = False
    rebasing: bool = False
    remotes: Dict[str, str] = field(default_factory=lambda: {"origin": "git@github.com:me/fork.git"})
    counts: Dict[str, int] = field(default_factory=dict)
    logs: Dict[str, List[str]] = field(default_factory=dict)
    history: List[str] = field(default_factory=list)

    fetch_error: Optional[str] = None
    rebase_error: Optional[str] = None
    push_error: Optional[str] = None

    calls: List[Tuple] = field(default_factory=list)
    rebased_onto: Optional[str] = None
    pushed: List[Tuple[str, str]] = field(default_factory=list)

    def _record(self, *call) -> None:
        self.calls.append(call)

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def is_repository(self) -> bool:
        self._record("is_repository")
        return self.repository

    def current_branch(self) -> Optional[str]:
        self._record("current_branch")
        return self.branch

    def tracking_branch(self) -> Optional[str]:
        self._record("tracking_branch")
        return self.tracking

    def is_dirty(self) -> bool:
        self._record("is_dirty")
        return self.dirty

    def rebase_in_progress(self) -> bool:
        self._record("rebase_in_progress")
        return self.rebasing

    def remote_names(self) -> List[str]:
        self._record("remote_names")
        return list(self.remotes)

    def get_remote_url(self, name: str) -> str:
        self._record("get_remote_url", name)
        if name not in self.remotes:
            raise GitCommandError(["git", "remote", "get-url", name], 2, stderr=f"error: No such remote '{name}'")
        return self.remotes[name]

    def add_remote(self, name: str, url: str) -> None:
        self._record("add_remote", name, url)
        self.remotes[name] = url

    def set_remote_url(self, name: str, url: str) -> None:
        self._record("set_remote_url", name, url)
        self.remotes[name] = url

    def fetch(self, remote: str) -> None:
        self._record("fetch", remote)
        if self.fetch_error:
            raise GitCommandError(["git", "fetch", remote], 128, stderr=self.fetch_error)

    def count_commits(self, rev_range: str) -> int:
        self._record("count_commits", rev_range)
        if rev_range not in self.counts:
            raise GitCommandError(
                ["git", "rev-list", "--count", rev_range], 128,
                stderr=f"fatal: ambiguous argument '{rev_range}': unknown revision or path not in the working tree.",
            )
        return self.counts[rev_range]

    def log_oneline(self, rev_range: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        self._record("log_oneline", rev_range, limit)
        lines = self.logs.get(rev_range, []) if rev_range else list(self.history)
        return lines[:limit] if limit is not None else lines

    def rebase(self, onto: str) -> None:
        self._record("rebase", onto)
        if self.rebase_error:
            self.rebasing = True
            raise GitCommandError(["git", "rebase", onto], 1, stderr=self.rebase_error)
        self.rebased_onto = onto

    def push_with_lease(self, remote: str, branch: str) -> None:
        self._record("push_with_lease", remote, branch)
        if self.push_error:
            raise GitCommandError(["git", "push", remote, branch, "--force-with-lease"], 1, stderr=self.push_error)
        self.pushed.append((remote, branch))


def scripted_confirm(answers) -> ConfirmFunc:
    """Confirmation function replaying pre-recorded answers in order."""
    pending = list(answers)

    def confirm(prompt: str) -> bool:
        if not pending:
            raise AssertionError(f"Unexpected prompt: {prompt}")
        return bool(pending.pop(0))

    return confirm
