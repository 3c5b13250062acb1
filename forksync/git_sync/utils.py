"""Utility classes and functions for fork synchronization."""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from ..errors import SyncErrorCode, get_error_resolution

if TYPE_CHECKING:
    from .repository_info import DivergenceReport, RemoteConfig, RepositoryContext


@dataclass
class SyncResult:
    """Outcome of a single sync step."""
    success: bool
    message: str
    operation: str
    error_code: Optional[SyncErrorCode] = None
    resolution_steps: List[str] = field(default_factory=list)
    hint: Optional[str] = None
    # Git's own error text, shown verbatim
    details: Optional[str] = None
    repository_context: Optional["RepositoryContext"] = None
    remote_config: Optional["RemoteConfig"] = None
    divergence: Optional["DivergenceReport"] = None


def create_sync_result(
    success: bool,
    message: str,
    operation: str,
    error_code: Optional[SyncErrorCode] = None,
    details: Optional[str] = None,
) -> SyncResult:
    """Create a SyncResult instance."""
    return SyncResult(
        success=success,
        message=message,
        operation=operation,
        error_code=error_code,
        details=details,
    )


def create_failure_result(
    error_code: SyncErrorCode,
    operation: str,
    branch: Optional[str] = None,
    origin: str = "origin",
    details: Optional[str] = None,
    message: Optional[str] = None,
    upstream: str = "upstream",
    upstream_url: Optional[str] = None,
    upstream_ref: Optional[str] = None,
) -> SyncResult:
    """
    Create a failed SyncResult carrying remediation guidance.

    Args:
        error_code: Failure kind
        operation: Name of the step that failed
        branch: Current branch, used in suggested push commands
        origin: Name of the fork's remote
        details: Verbatim error output from git, if any
        message: Override for the default user message
        upstream: Name of the upstream remote
        upstream_url: Expected URL of the upstream remote
        upstream_ref: Ref local commits are rebased onto

    Returns:
        SyncResult with resolution steps filled in from the error taxonomy
    """
    resolution = get_error_resolution(
        error_code,
        branch=branch,
        origin=origin,
        upstream=upstream,
        upstream_url=upstream_url,
        upstream_ref=upstream_ref,
    )
    return SyncResult(
        success=False,
        message=message or resolution.user_message,
        operation=operation,
        error_code=error_code,
        resolution_steps=list(resolution.resolution_steps),
        hint=resolution.hint,
        details=details,
    )


def git_error_text(error: Exception) -> str:
    """Extract git's own error output from a GitCommandError-like exception."""
    stderr = getattr(error, "stderr", None)
    if stderr:
        text = stderr.strip()
        # GitPython prefixes captured output with "stderr: '...'"
        if text.startswith("stderr:"):
            text = text[len("stderr:"):].strip()
            if len(text) >= 2 and text[0] == text[-1] == "'":
                text = text[1:-1]
        return text.strip()
    return str(error)
