"""Upstream remote resolution for fork synchronization."""

import logging
from typing import Optional

from git import GitCommandError

from ..console import Console, ConfirmFunc
from ..errors import SyncErrorCode
from .backend import GitBackend
from .repository_info import RemoteConfig
from .utils import SyncResult, create_failure_result, git_error_text


def ensure_upstream_remote(
    backend: GitBackend,
    console: Console,
    confirm: ConfirmFunc,
    remote_name: str,
    requested_url: str,
    branch: Optional[str] = None,
) -> SyncResult:
    """
    Make sure the upstream remote exists, optionally updating its URL.

    An absent remote is created with ``requested_url``. An existing remote
    with a different URL is only rewritten after the user confirms;
    declining keeps the existing URL and is not a failure.

    Args:
        backend: Repository backend
        console: Status output
        confirm: Yes/no prompt capability
        remote_name: Name of the upstream remote
        requested_url: URL the remote should point at
        branch: Current branch, for remediation text

    Returns:
        SyncResult with ``remote_config`` filled in on success
    """
    logger = logging.getLogger('forksync.git_sync.remote_utils')

    try:
        if remote_name not in backend.remote_names():
            console.info("Adding upstream remote...")
            backend.add_remote(remote_name, requested_url)
            console.success(f"Added upstream remote: {requested_url}")
            logger.info(f"Added remote '{remote_name}' -> {requested_url}")

            result = SyncResult(
                success=True,
                message=f"Added remote '{remote_name}'",
                operation="ensure_upstream_remote",
            )
            result.remote_config = RemoteConfig(
                name=remote_name, url=requested_url, exists=True, updated=True
            )
            return result

        existing_url = backend.get_remote_url(remote_name)
        console.success(f"Upstream remote '{remote_name}' already exists")
        console.line(f"  URL: {existing_url}")

        remote_config = RemoteConfig(name=remote_name, url=existing_url, exists=True)

        if existing_url != requested_url:
            remote_config.proposed_url = requested_url
            console.warning("Warning: Existing upstream URL differs from provided URL")
            if confirm(f"Update upstream URL to {requested_url}?"):
                backend.set_remote_url(remote_name, requested_url)
                remote_config.url = requested_url
                remote_config.updated = True
                console.success("Updated upstream URL")
                logger.info(f"Updated remote '{remote_name}' URL: {existing_url} -> {requested_url}")
            else:
                logger.info(f"Keeping existing URL for remote '{remote_name}': {existing_url}")

        result = SyncResult(
            success=True,
            message=f"Remote '{remote_name}' points at {remote_config.url}",
            operation="ensure_upstream_remote",
        )
        result.remote_config = remote_config
        return result

    except GitCommandError as e:
        logger.error(f"Git command error while configuring remote '{remote_name}': {e}")
        return create_failure_result(
            SyncErrorCode.GIT_COMMAND_ERROR, "ensure_upstream_remote", branch=branch, details=git_error_text(e)
        )
