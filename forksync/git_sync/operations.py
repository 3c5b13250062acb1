"""Fetch, rebase and push operations for fork synchronization.

Each operation is attempted exactly once. Failures are reported with git's
own error text and the manual commands needed to finish the job.
"""

import logging
from typing import Optional

from git import GitCommandError

from ..console import Console
from ..errors import SyncErrorCode
from .backend import GitBackend
from .utils import SyncResult, create_failure_result, create_sync_result, git_error_text


def fetch_upstream(
    backend: GitBackend,
    console: Console,
    remote_name: str,
    branch: Optional[str] = None,
    remote_url: Optional[str] = None,
) -> SyncResult:
    """Fetch refs from the upstream remote."""
    logger = logging.getLogger('forksync.git_sync.operations')

    console.blank()
    console.info("Fetching from upstream...")

    try:
        backend.fetch(remote_name)
    except GitCommandError as e:
        details = git_error_text(e)
        logger.error(f"Fetch from '{remote_name}' failed: {details}")
        return create_failure_result(
            SyncErrorCode.REMOTE_FETCH_FAILURE,
            "fetch_upstream",
            branch=branch,
            details=details,
            message=f"Fetch from '{remote_name}' failed",
            upstream=remote_name,
            upstream_url=remote_url,
        )

    logger.info(f"Fetched from '{remote_name}'")
    return create_sync_result(True, f"Fetched from '{remote_name}'", "fetch_upstream")


def rebase_onto_upstream(
    backend: GitBackend,
    console: Console,
    upstream_ref: str,
    branch: str,
    origin: str = "origin",
) -> SyncResult:
    """
    Replay local commits on top of the upstream main line.

    A failed rebase is reported as a conflict and left in progress for the
    user to resolve; nothing is aborted or resolved automatically.

    Args:
        backend: Repository backend
        console: Status output
        upstream_ref: Ref to rebase onto, e.g. upstream/master
        branch: Current branch, for remediation text
        origin: Name of the fork's remote

    Returns:
        SyncResult indicating success or a REBASE_CONFLICT failure
    """
    logger = logging.getLogger('forksync.git_sync.operations')

    console.blank()
    console.info(f"Rebasing on {upstream_ref}...")

    try:
        backend.rebase(upstream_ref)
    except GitCommandError as e:
        details = git_error_text(e)
        logger.error(f"Rebase of '{branch}' onto {upstream_ref} failed: {details}")
        return create_failure_result(
            SyncErrorCode.REBASE_CONFLICT,
            "rebase_onto_upstream",
            branch=branch,
            origin=origin,
            details=details,
        )

    console.success("Rebase successful!")
    logger.info(f"Rebased '{branch}' onto {upstream_ref}")
    return create_sync_result(True, f"Rebased '{branch}' onto {upstream_ref}", "rebase_onto_upstream")


def push_to_origin(backend: GitBackend, console: Console, origin: str, branch: str) -> SyncResult:
    """Force-push the branch to the fork with a lease."""
    logger = logging.getLogger('forksync.git_sync.operations')

    console.blank()
    console.info(f"Pushing to {origin}...")

    try:
        backend.push_with_lease(origin, branch)
    except GitCommandError as e:
        details = git_error_text(e)
        logger.error(f"Push of '{branch}' to '{origin}' failed: {details}")
        return create_failure_result(
            SyncErrorCode.PUSH_REJECTED,
            "push_to_origin",
            branch=branch,
            origin=origin,
            details=details,
        )

    console.success(f"Successfully pushed to {origin}/{branch}")
    logger.info(f"Pushed '{branch}' to '{origin}'")
    return create_sync_result(True, f"Pushed '{branch}' to {origin}/{branch}", "push_to_origin")
