"""Fork sync pipeline: validate, resolve remote, fetch, compare, rebase, push."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from git import GitCommandError

from ..config import Config
from ..console import Console, ConfirmFunc, GREEN
from ..errors import ErrorCategory, SyncErrorCode, force_push_command, get_error_resolution
from .backend import GitBackend
from .divergence import compute_divergence, show_preserved_commits
from .operations import fetch_upstream, push_to_origin, rebase_onto_upstream
from .remote_utils import ensure_upstream_remote
from .repository_info import DivergenceReport, SyncState
from .utils import SyncResult, create_failure_result, git_error_text
from .validation import check_environment


@dataclass
class SyncContext:
    """Everything a sync run needs from the outside world."""
    backend: GitBackend
    console: Console
    confirm: ConfirmFunc
    config: Config = field(default_factory=Config)


@dataclass
class SyncOutcome:
    """Final result of a sync run."""
    exit_code: int
    state: SyncState
    result: SyncResult
    states: List[SyncState] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class SyncOrchestrator:
    """Runs the fork sync pipeline once against a repository backend."""

    def __init__(self, context: SyncContext):
        self.context = context
        self.backend = context.backend
        self.console = context.console
        self.confirm = context.confirm
        self.config = context.config
        self.logger = logging.getLogger('forksync.git_sync')

        self.state = SyncState.VALIDATING
        self.states: List[SyncState] = [self.state]
        self.branch: Optional[str] = None

    def _transition(self, state: SyncState) -> None:
        self.logger.debug(f"Sync state: {self.state.value} -> {state.value}")
        self.state = state
        self.states.append(state)

    def _finish(self, state: SyncState, result: SyncResult) -> SyncOutcome:
        self._transition(state)
        return SyncOutcome(exit_code=0, state=state, result=result, states=list(self.states))

    def _failure_result(self, code: SyncErrorCode, operation: str, details: Optional[str] = None) -> SyncResult:
        return create_failure_result(
            code,
            operation,
            branch=self.branch,
            origin=self.config.origin_remote,
            details=details,
            upstream=self.config.upstream_remote,
            upstream_ref=self.config.upstream_ref,
        )

    def _fail(self, result: SyncResult) -> SyncOutcome:
        """Print a failure with its remediation and end the run."""
        self._transition(SyncState.FAILED)

        message = result.message
        if result.error_code and get_error_resolution(result.error_code).category == ErrorCategory.PRECONDITION:
            message = f"Error: {message}"

        self.console.blank()
        self.console.error(message)
        if result.details:
            self.console.indented(result.details.splitlines())
        if result.hint:
            self.console.warning(result.hint)
        if result.resolution_steps:
            self.console.indented(result.resolution_steps)

        self.logger.debug(f"Sync failed in {result.operation}: {result.error_code}")
        return SyncOutcome(exit_code=1, state=SyncState.FAILED, result=result, states=list(self.states))

    def run(self, upstream_url: Optional[str] = None) -> SyncOutcome:
        """
        Sync the current branch with upstream.

        Args:
            upstream_url: URL for the upstream remote; the configured default
                is used when omitted

        Returns:
            SyncOutcome with exit code 0 for up-to-date, pushed and
            push-skipped runs, 1 otherwise
        """
        requested_url = upstream_url or self.config.default_upstream_url

        self.console.heading("=== Fork Sync ===")
        self.console.blank()

        try:
            return self._run(requested_url)
        except GitCommandError as e:
            self.logger.error(f"Git command error during sync: {e}")
            return self._fail(self._failure_result(SyncErrorCode.GIT_COMMAND_ERROR, "sync", git_error_text(e)))
        except Exception as e:
            self.logger.error(f"Unexpected error during sync: {e}", exc_info=True)
            return self._fail(self._failure_result(SyncErrorCode.UNEXPECTED_ERROR, "sync", str(e)))

    def _run(self, requested_url: str) -> SyncOutcome:
        config = self.config
        origin = config.origin_remote

        # 1. Environment
        result = check_environment(self.backend, self.console, origin=origin)
        if not result.success:
            return self._fail(result)
        repo_context = result.repository_context
        self.branch = repo_context.current_branch

        # 2. Remote
        self._transition(SyncState.RESOLVING_REMOTE)
        result = ensure_upstream_remote(
            self.backend, self.console, self.confirm,
            config.upstream_remote, requested_url, branch=self.branch,
        )
        if not result.success:
            return self._fail(result)

        # 3. Fetch
        self._transition(SyncState.FETCHING)
        result = fetch_upstream(
            self.backend, self.console, config.upstream_remote,
            branch=self.branch, remote_url=requested_url,
        )
        if not result.success:
            return self._fail(result)
        self.console.info("Remote tracking branch:", repo_context.tracking_branch)

        # 4. Divergence
        self._transition(SyncState.COMPUTING_DIVERGENCE)
        result = compute_divergence(self.backend, self.console, self.branch, config.upstream_ref)
        if not result.success:
            return self._fail(result)
        report = result.divergence

        if report.is_up_to_date:
            self.console.blank()
            self.console.success("Already up to date with upstream!", GREEN)
            return self._finish(SyncState.UP_TO_DATE, result)

        # 5. Rebase
        self._transition(SyncState.CONFIRMING_REBASE)
        show_preserved_commits(self.backend, self.console, report)
        self.console.blank()
        self.console.warning(
            f"This will rebase your {report.to_preserve} local commit(s) "
            f"on top of {report.behind} upstream commit(s)"
        )
        if not self.confirm("Continue with rebase?"):
            self.logger.info("User declined rebase")
            return self._fail(self._failure_result(SyncErrorCode.USER_DECLINED, "confirm_rebase"))

        self._transition(SyncState.REBASING)
        result = rebase_onto_upstream(self.backend, self.console, config.upstream_ref, self.branch, origin=origin)
        if not result.success:
            return self._fail(result)

        # 6. Push
        self._transition(SyncState.CONFIRMING_PUSH)
        self.console.blank()
        self.console.warning(f"Ready to force-push to {origin}/{self.branch}")
        self.console.warning("This will update your remote fork")
        if not self.confirm(f"Push to {origin}?"):
            self.logger.info("User skipped push")
            self.console.warning("Skipped push. You can push manually later:")
            self.console.indented([force_push_command(self.branch, origin)])
            return self._finish(SyncState.PUSH_SKIPPED, SyncResult(
                success=True,
                message="Rebased locally, push skipped",
                operation="confirm_push",
                divergence=report,
            ))

        self._transition(SyncState.PUSHING)
        result = push_to_origin(self.backend, self.console, origin, self.branch)
        if not result.success:
            return self._fail(result)

        # 7. Summary
        self.print_summary(report)
        result.divergence = report
        return self._finish(SyncState.DONE, result)

    def print_summary(self, report: DivergenceReport) -> None:
        origin = self.config.origin_remote

        self.console.blank()
        self.console.heading("=== Sync Complete ===", GREEN)
        self.console.success(f"Fetched {report.behind} new commits from upstream")
        self.console.success(f"Preserved {report.to_preserve} local commit(s)")
        self.console.success(f"Pushed to {origin}/{report.branch}")
        self.console.blank()
        self.console.info("Latest commits:")
        self.console.indented(self.backend.log_oneline(limit=self.config.log_limit))


def sync_fork(context: SyncContext, upstream_url: Optional[str] = None) -> SyncOutcome:
    """Convenience function running a single sync."""
    return SyncOrchestrator(context).run(upstream_url)
