"""Repository information and sync state data structures."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SyncState(Enum):
    """States of a single fork sync run."""
    VALIDATING = "validating"
    RESOLVING_REMOTE = "resolving_remote"
    FETCHING = "fetching"
    COMPUTING_DIVERGENCE = "computing_divergence"
    UP_TO_DATE = "up_to_date"             # Terminal, nothing to do
    CONFIRMING_REBASE = "confirming_rebase"
    REBASING = "rebasing"
    CONFIRMING_PUSH = "confirming_push"
    PUSH_SKIPPED = "push_skipped"         # Terminal, local history rebased
    PUSHING = "pushing"
    DONE = "done"                         # Terminal
    FAILED = "failed"                     # Terminal

    @property
    def is_terminal(self) -> bool:
        return self in (SyncState.UP_TO_DATE, SyncState.PUSH_SKIPPED, SyncState.DONE, SyncState.FAILED)


@dataclass
class RepositoryContext:
    """Working copy facts gathered by the environment check."""
    is_repository: bool
    current_branch: Optional[str] = None
    is_clean: bool = False
    tracking_branch: Optional[str] = None


@dataclass
class RemoteConfig:
    """Upstream remote configuration as resolved for this run."""
    name: str
    url: Optional[str]
    exists: bool
    proposed_url: Optional[str] = None
    updated: bool = False


@dataclass
class DivergenceReport:
    """Commit counts between the local branch and the upstream main line."""
    branch: str
    upstream_ref: str
    to_preserve: int
    behind: int

    @property
    def is_up_to_date(self) -> bool:
        return self.behind == 0

    @property
    def preserve_range(self) -> str:
        """Range of local-only commits."""
        return f"{self.upstream_ref}..{self.branch}"

    @property
    def behind_range(self) -> str:
        """Range of upstream-only commits."""
        return f"{self.branch}..{self.upstream_ref}"
