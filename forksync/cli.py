"""Command line entry point for forksync."""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Config, load_configuration, validate_configuration
from .console import Console, make_stdin_confirm
from .git_sync.backend import GitPythonBackend
from .git_sync.orchestrator import SyncContext, SyncOrchestrator


def setup_logging(config: Config) -> None:
    """Send package logs to stderr so they never mix with status output."""
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('forksync')
    logger.setLevel(getattr(logging, config.log_level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forksync",
        description="Sync a fork with its upstream repository while preserving local commits.",
    )
    parser.add_argument(
        "upstream_url",
        nargs="?",
        default=None,
        metavar="upstream-repo-url",
        help="URL of the upstream repository (default: configured upstream URL)",
    )
    parser.add_argument(
        "--repo",
        default=".",
        help="Path to the fork's working copy (default: current directory)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log git operations to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run a fork sync and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_configuration()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        config.log_level = "DEBUG"
    if args.no_color or not sys.stdout.isatty():
        config.use_color = False

    setup_logging(config)
    logger = logging.getLogger('forksync.cli')
    for warning in validate_configuration(config):
        logger.warning(warning)

    console = Console(sys.stdout, use_color=config.use_color)
    context = SyncContext(
        backend=GitPythonBackend(args.repo),
        console=console,
        confirm=make_stdin_confirm(console),
        config=config,
    )

    try:
        outcome = SyncOrchestrator(context).run(args.upstream_url)
    except KeyboardInterrupt:
        console.blank()
        console.error("Interrupted")
        return 1

    logger.debug(f"Sync finished in state {outcome.state.value} with exit code {outcome.exit_code}")
    return outcome.exit_code


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
