"""Commit divergence between a fork branch and the upstream main line."""

import logging

from git import GitCommandError

from ..console import Console, GREEN, YELLOW
from ..errors import SyncErrorCode
from .backend import GitBackend
from .repository_info import DivergenceReport
from .utils import SyncResult, create_failure_result, git_error_text


def compute_divergence(backend: GitBackend, console: Console, branch: str, upstream_ref: str) -> SyncResult:
    """
    Count local-only and upstream-only commits and print them.

    Args:
        backend: Repository backend
        console: Status output
        branch: Local branch being synced
        upstream_ref: Remote-tracking ref of the upstream main line

    Returns:
        SyncResult with ``divergence`` filled in on success
    """
    logger = logging.getLogger('forksync.git_sync.divergence')

    try:
        report = DivergenceReport(branch=branch, upstream_ref=upstream_ref, to_preserve=0, behind=0)
        report.to_preserve = backend.count_commits(report.preserve_range)
        report.behind = backend.count_commits(report.behind_range)
    except (GitCommandError, ValueError) as e:
        logger.error(f"Failed to count commits against {upstream_ref}: {e}")
        return create_failure_result(
            SyncErrorCode.GIT_COMMAND_ERROR,
            "compute_divergence",
            branch=branch,
            details=git_error_text(e),
            upstream_ref=upstream_ref,
            message=f"Could not compare '{branch}' with '{upstream_ref}'",
        )

    logger.debug(f"Divergence for {branch}: to_preserve={report.to_preserve}, behind={report.behind}")

    console.blank()
    console.info("Status:")
    console.markup(f"  {console.paint(str(report.to_preserve), GREEN)} local commit(s) to preserve")
    console.markup(f"  {console.paint(str(report.behind), YELLOW)} commit(s) behind upstream")

    result = SyncResult(
        success=True,
        message=f"{report.to_preserve} to preserve, {report.behind} behind",
        operation="compute_divergence",
    )
    result.divergence = report
    return result


def show_preserved_commits(backend: GitBackend, console: Console, report: DivergenceReport) -> None:
    """List the local commits that the rebase will replay."""
    if report.to_preserve <= 0:
        return

    console.blank()
    console.info("Local commits to preserve:")
    console.indented(backend.log_oneline(report.preserve_range))
