"""Narrow version-control backend used by the sync steps, implemented with GitPython."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError


class GitBackend(ABC):
    """
    The set of git capabilities the fork sync needs.

    Methods that talk to git raise ``GitCommandError`` on failure so callers
    can surface git's own error output.
    """

    @abstractmethod
    def is_repository(self) -> bool:
        """Whether the working directory is inside a git work tree."""

    @abstractmethod
    def current_branch(self) -> Optional[str]:
        """Checked out branch name, or None when HEAD is detached."""

    @abstractmethod
    def tracking_branch(self) -> Optional[str]:
        """Configured upstream of the current branch, e.g. origin/main."""

    @abstractmethod
    def is_dirty(self) -> bool:
        """Whether tracked files have staged or unstaged changes."""

    @abstractmethod
    def rebase_in_progress(self) -> bool:
        """Whether an earlier rebase stopped and is waiting to be continued or aborted."""

    @abstractmethod
    def remote_names(self) -> List[str]:
        pass

    @abstractmethod
    def get_remote_url(self, name: str) -> str:
        pass

    @abstractmethod
    def add_remote(self, name: str, url: str) -> None:
        pass

    @abstractmethod
    def set_remote_url(self, name: str, url: str) -> None:
        pass

    @abstractmethod
    def fetch(self, remote: str) -> None:
        pass

    @abstractmethod
    def count_commits(self, rev_range: str) -> int:
        """Number of commits in a ``a..b`` range."""

    @abstractmethod
    def log_oneline(self, rev_range: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        """Commits as ``<short-sha> <subject>`` lines, newest first."""

    @abstractmethod
    def rebase(self, onto: str) -> None:
        """Replay the current branch's commits onto a ref."""

    @abstractmethod
    def push_with_lease(self, remote: str, branch: str) -> None:
        """Force-push a branch, refusing if the remote moved since last fetch."""


class GitPythonBackend(GitBackend):
    """GitBackend operating on a real repository through GitPython."""

    def __init__(self, path: Union[str, Path] = "."):
        self.logger = logging.getLogger('forksync.git_sync.backend')
        self.path = Path(path)
        self._repo: Optional[Repo] = None

        try:
            self._repo = Repo(self.path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            self.logger.debug(f"No git repository at {self.path}: {e}")

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            raise InvalidGitRepositoryError(str(self.path))
        return self._repo

    def is_repository(self) -> bool:
        if self._repo is None:
            return False
        # A bare repository has no work tree to rebase in
        return not self._repo.bare

    def current_branch(self) -> Optional[str]:
        if self.repo.head.is_detached:
            return None
        return self.repo.active_branch.name

    def tracking_branch(self) -> Optional[str]:
        try:
            tracking = self.repo.active_branch.tracking_branch()
        except TypeError:
            # Detached HEAD
            return None
        return tracking.name if tracking is not None else None

    def is_dirty(self) -> bool:
        return self.repo.is_dirty(index=True, working_tree=True, untracked_files=False)

    def rebase_in_progress(self) -> bool:
        git_dir = Path(self.repo.git_dir)
        return any((git_dir / name).exists() for name in ("rebase-merge", "rebase-apply"))

    def remote_names(self) -> List[str]:
        return [remote.name for remote in self.repo.remotes]

    def get_remote_url(self, name: str) -> str:
        return self.repo.git.remote("get-url", name)

    def add_remote(self, name: str, url: str) -> None:
        self.logger.debug(f"Adding remote {name} -> {url}")
        self.repo.create_remote(name, url)

    def set_remote_url(self, name: str, url: str) -> None:
        self.logger.debug(f"Setting remote {name} URL -> {url}")
        self.repo.git.remote("set-url", name, url)

    def fetch(self, remote: str) -> None:
        self.logger.debug(f"Fetching {remote}")
        self.repo.git.fetch(remote)

    def count_commits(self, rev_range: str) -> int:
        return int(self.repo.git.rev_list("--count", rev_range).strip())

    def log_oneline(self, rev_range: Optional[str] = None, limit: Optional[int] = None) -> List[str]:
        args = ["--oneline"]
        if limit is not None:
            args.append(f"-{limit}")
        if rev_range:
            args.append(rev_range)
        output = self.repo.git.log(*args)
        return [line for line in output.splitlines() if line.strip()]

    def rebase(self, onto: str) -> None:
        self.logger.debug(f"Rebasing onto {onto}")
        self.repo.git.rebase(onto)

    def push_with_lease(self, remote: str, branch: str) -> None:
        self.logger.debug(f"Pushing {branch} to {remote} with lease")
        self.repo.git.push(remote, branch, "--force-with-lease")


__all__ = ["GitBackend", "GitPythonBackend", "GitCommandError"]
