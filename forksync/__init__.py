"""
forksync - keep a forked git repository in sync with its upstream.

Fetches the upstream remote, rebases local commits on top of the upstream
main line and force-pushes the result to the fork with a lease.
"""

__version__ = "1.0.0"
__description__ = "Sync a fork with upstream while preserving local commits"

from .cli import main

__all__ = ["main"]
