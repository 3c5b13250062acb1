"""Error taxonomy and remediation guidance for fork synchronization."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SyncErrorCode(Enum):
    """Terminal failure kinds a sync run can end with."""
    NOT_A_REPOSITORY = "NOT_A_REPOSITORY"
    DIRTY_WORKING_TREE = "DIRTY_WORKING_TREE"
    DETACHED_HEAD = "DETACHED_HEAD"
    REMOTE_FETCH_FAILURE = "REMOTE_FETCH_FAILURE"
    REBASE_CONFLICT = "REBASE_CONFLICT"
    USER_DECLINED = "USER_DECLINED"
    PUSH_REJECTED = "PUSH_REJECTED"
    GIT_COMMAND_ERROR = "GIT_COMMAND_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ErrorCategory(Enum):
    """Categories of sync errors for appropriate handling."""
    PRECONDITION = "precondition"
    NETWORK = "network"
    MERGE_CONFLICT = "merge_conflict"
    USER_DECISION = "user_decision"
    GIT_COMMAND = "git_command"
    UNKNOWN = "unknown"


@dataclass
class ErrorResolution:
    """Information about how a user can recover from a specific error."""
    code: SyncErrorCode
    category: ErrorCategory
    user_message: str
    resolution_steps: List[str] = field(default_factory=list)
    # Lines printed ahead of the resolution steps
    hint: Optional[str] = None


def force_push_command(branch: str, origin: str = "origin") -> str:
    """Manual lease-protected push command for a branch."""
    return f"git push {origin} {branch} --force-with-lease"


def get_error_resolution(
    code: SyncErrorCode,
    branch: Optional[str] = None,
    origin: str = "origin",
    upstream: str = "upstream",
    upstream_url: Optional[str] = None,
    upstream_ref: Optional[str] = None,
) -> ErrorResolution:
    """
    Build the remediation guidance for an error code.

    Args:
        code: The failure kind
        branch: Current branch, used in push commands
        origin: Name of the remote the fork is pushed to
        upstream: Name of the upstream remote
        upstream_url: URL the upstream remote should point at
        upstream_ref: Ref local commits are rebased onto

    Returns:
        ErrorResolution with the manual commands the user would need
    """
    branch = branch or "<branch>"
    push_cmd = force_push_command(branch, origin)
    upstream_ref = upstream_ref or f"{upstream}/master"

    if code == SyncErrorCode.NOT_A_REPOSITORY:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.PRECONDITION,
            user_message="Not in a git repository",
            hint="Run this tool from inside your fork's working copy",
            resolution_steps=["cd <path-to-your-fork>"],
        )
    if code == SyncErrorCode.DIRTY_WORKING_TREE:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.PRECONDITION,
            user_message="Working directory has uncommitted changes",
            hint="Please commit or stash your changes first",
            resolution_steps=["git stash"],
        )
    if code == SyncErrorCode.DETACHED_HEAD:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.PRECONDITION,
            user_message="HEAD is detached, no branch is checked out",
            hint="Check out the branch you want to sync first",
            resolution_steps=["git checkout <branch>"],
        )
    if code == SyncErrorCode.REMOTE_FETCH_FAILURE:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.NETWORK,
            user_message="Fetch from upstream failed",
            hint="Check the upstream URL and your network access, then fetch manually",
            resolution_steps=[
                "git remote -v",
                f"git remote set-url {upstream} {upstream_url or '<upstream-url>'}",
                f"git fetch {upstream}",
            ],
        )
    if code == SyncErrorCode.REBASE_CONFLICT:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.MERGE_CONFLICT,
            user_message="Rebase failed with conflicts",
            hint="Please resolve conflicts and run the commands below, or run this tool again after continuing the rebase",
            resolution_steps=["git rebase --continue", push_cmd],
        )
    if code == SyncErrorCode.USER_DECLINED:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.USER_DECISION,
            user_message="Aborted",
            hint="Nothing was rebased or pushed. To sync manually later:",
            resolution_steps=[f"git rebase {upstream_ref}", push_cmd],
        )
    if code == SyncErrorCode.PUSH_REJECTED:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.NETWORK,
            user_message="Push failed",
            hint="You may need to push manually",
            resolution_steps=[push_cmd],
        )
    if code == SyncErrorCode.GIT_COMMAND_ERROR:
        return ErrorResolution(
            code=code,
            category=ErrorCategory.GIT_COMMAND,
            user_message="Git command failed",
            hint="Inspect the repository state and the refs being compared",
            resolution_steps=["git status", f"git fetch {upstream}", f"git rev-parse --verify {upstream_ref}"],
        )
    return ErrorResolution(
        code=SyncErrorCode.UNEXPECTED_ERROR,
        category=ErrorCategory.UNKNOWN,
        user_message="Unexpected error during fork sync",
        hint="Inspect the repository state before retrying",
        resolution_steps=["git status"],
    )


def rebase_in_progress_resolution(branch: Optional[str] = None, origin: str = "origin") -> ErrorResolution:
    """Guidance when a previous rebase is still stopped on a conflict."""
    return ErrorResolution(
        code=SyncErrorCode.REBASE_CONFLICT,
        category=ErrorCategory.MERGE_CONFLICT,
        user_message="A rebase is already in progress",
        hint="Finish or abort it before syncing again; do not check out another branch",
        resolution_steps=[
            "git status",
            "git rebase --continue",
            "git rebase --abort",
            force_push_command(branch or "<branch>", origin),
        ],
    )
