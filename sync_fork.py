#!/usr/bin/env python3
"""
Fork sync script.

Syncs a forked repository with its upstream while preserving local commits.

Usage: ./sync_fork.py [upstream-repo-url]
"""

from forksync.cli import run


if __name__ == "__main__":
    run()
