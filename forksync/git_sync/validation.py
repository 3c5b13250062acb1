"""Working copy validation before a fork sync."""

import logging

from git import GitCommandError

from ..console import Console
from ..errors import ErrorResolution, SyncErrorCode, rebase_in_progress_resolution
from .backend import GitBackend
from .repository_info import RepositoryContext
from .utils import SyncResult, create_failure_result, git_error_text


def check_environment(backend: GitBackend, console: Console, origin: str = "origin") -> SyncResult:
    """
    Validate that the working copy can be synced.

    This function checks:
    1. The directory is inside a git work tree
    2. No earlier rebase is stopped mid-way
    3. Tracked files have no uncommitted changes
    4. A branch is checked out

    Nothing here touches the network.

    Args:
        backend: Repository backend
        console: Status output
        origin: Name of the fork's remote, used for the tracking fallback

    Returns:
        SyncResult with ``repository_context`` filled in on success
    """
    logger = logging.getLogger('forksync.git_sync.validation')

    try:
        if not backend.is_repository():
            logger.error("Working directory is not a git repository")
            return create_failure_result(SyncErrorCode.NOT_A_REPOSITORY, "check_environment", origin=origin)

        branch = backend.current_branch()

        # HEAD is detached while a rebase is stopped, so this goes first
        if backend.rebase_in_progress():
            logger.error("A rebase is already in progress")
            return _failure_from_resolution(rebase_in_progress_resolution(branch, origin), "check_environment")

        if branch:
            console.info("Current branch:", branch)

        if backend.is_dirty():
            logger.error("Working tree has uncommitted changes")
            return create_failure_result(SyncErrorCode.DIRTY_WORKING_TREE, "check_environment", branch=branch, origin=origin)

        if not branch:
            logger.error("HEAD is detached")
            return create_failure_result(SyncErrorCode.DETACHED_HEAD, "check_environment", origin=origin)

        tracking = backend.tracking_branch() or f"{origin}/{branch}"
        logger.debug(f"Environment valid: branch={branch}, tracking={tracking}")

        result = SyncResult(
            success=True,
            message=f"Working tree clean on branch '{branch}'",
            operation="check_environment",
        )
        result.repository_context = RepositoryContext(
            is_repository=True,
            current_branch=branch,
            is_clean=True,
            tracking_branch=tracking,
        )
        return result

    except GitCommandError as e:
        logger.error(f"Git command error during environment check: {e}")
        return create_failure_result(
            SyncErrorCode.GIT_COMMAND_ERROR, "check_environment", origin=origin, details=git_error_text(e)
        )


def _failure_from_resolution(resolution: ErrorResolution, operation: str) -> SyncResult:
    return SyncResult(
        success=False,
        message=resolution.user_message,
        operation=operation,
        error_code=resolution.code,
        resolution_steps=list(resolution.resolution_steps),
        hint=resolution.hint,
    )
