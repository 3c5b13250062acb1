#!/usr/bin/env python3
"""
Integration tests running the fork sync against real git repositories.

Each test builds three repositories in a temporary directory:
an upstream work tree, a bare "origin" cloned from it, and a fork work
tree cloned from origin.
"""

import io
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent))

from forksync.cli import build_parser, main
from forksync.config import Config
from forksync.console import Console
from forksync.errors import SyncErrorCode
from forksync.git_sync.backend import GitPythonBackend
from forksync.git_sync.fake_backend import scripted_confirm
from forksync.git_sync.orchestrator import SyncContext, SyncOrchestrator
from forksync.git_sync.repository_info import SyncState


def git(cwd: Path, *args: str) -> str:
    """Run a git command and return its stripped stdout."""
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


def configure_identity(repo_dir: Path) -> None:
    git(repo_dir, "config", "user.name", "Test User")
    git(repo_dir, "config", "user.email", "test@example.com")
    git(repo_dir, "config", "commit.gpgsign", "false")


def commit_file(repo_dir: Path, name: str, content: str, message: str) -> None:
    (repo_dir / name).write_text(content)
    git(repo_dir, "add", name)
    git(repo_dir, "commit", "-m", message)


@unittest.skipUnless(shutil.which("git"), "git executable not available")
class TestGitPythonBackendSync(unittest.TestCase):
    """End-to-end sync scenarios with GitPythonBackend."""

    def setUp(self):
        print(f"\nSetting up test: {self._testMethodName}")
        self.temp_dir = Path(tempfile.mkdtemp())

        self.upstream_dir = self.temp_dir / "upstream"
        self.origin_dir = self.temp_dir / "origin.git"
        self.fork_dir = self.temp_dir / "fork"

        self.upstream_dir.mkdir()
        git(self.upstream_dir, "init")
        git(self.upstream_dir, "symbolic-ref", "HEAD", "refs/heads/master")
        configure_identity(self.upstream_dir)
        commit_file(self.upstream_dir, "README.md", "# Project\n", "Initial commit")

        git(self.temp_dir, "clone", "--bare", str(self.upstream_dir), str(self.origin_dir))
        git(self.temp_dir, "clone", str(self.origin_dir), str(self.fork_dir))
        configure_identity(self.fork_dir)

        commit_file(self.fork_dir, "local.txt", "fork only\n", "Local change")
        git(self.fork_dir, "push", "origin", "master")

        self.output = io.StringIO()

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def run_sync(self, answers):
        context = SyncContext(
            backend=GitPythonBackend(self.fork_dir),
            console=Console(self.output, use_color=False),
            confirm=scripted_confirm(answers),
            config=Config(),
        )
        return SyncOrchestrator(context).run(str(self.upstream_dir))

    def subjects(self, repo_dir: Path, ref: str = "HEAD"):
        return git(repo_dir, "log", "--format=%s", ref).splitlines()

    def test_backend_queries(self):
        backend = GitPythonBackend(self.fork_dir)

        self.assertTrue(backend.is_repository())
        self.assertEqual(backend.current_branch(), "master")
        self.assertEqual(backend.tracking_branch(), "origin/master")
        self.assertFalse(backend.is_dirty())
        self.assertEqual(backend.remote_names(), ["origin"])
        self.assertEqual(backend.log_oneline(limit=1)[0].split(" ", 1)[1], "Local change")
        self.assertEqual(backend.count_commits("origin/master..master"), 0)

    def test_untracked_files_do_not_count_as_dirty(self):
        (self.fork_dir / "scratch.txt").write_text("untracked\n")

        self.assertFalse(GitPythonBackend(self.fork_dir).is_dirty())

    def test_sync_rebases_and_pushes(self):
        commit_file(self.upstream_dir, "a.txt", "a\n", "Upstream one")
        commit_file(self.upstream_dir, "b.txt", "b\n", "Upstream two")

        outcome = self.run_sync([True, True])

        self.assertEqual(outcome.exit_code, 0, self.output.getvalue())
        self.assertEqual(outcome.state, SyncState.DONE)
        self.assertEqual(outcome.result.divergence.to_preserve, 1)
        self.assertEqual(outcome.result.divergence.behind, 2)
        self.assertEqual(
            self.subjects(self.fork_dir),
            ["Local change", "Upstream two", "Upstream one", "Initial commit"],
        )
        self.assertEqual(git(self.origin_dir, "rev-parse", "master"), git(self.fork_dir, "rev-parse", "HEAD"))
        self.assertEqual(git(self.fork_dir, "remote", "get-url", "upstream"), str(self.upstream_dir))
        print("  ✓ Local commit replayed on top of upstream and pushed")

    def test_up_to_date_fork(self):
        outcome = self.run_sync([])

        self.assertEqual(outcome.exit_code, 0, self.output.getvalue())
        self.assertEqual(outcome.state, SyncState.UP_TO_DATE)
        self.assertIn("1 local commit(s) to preserve", self.output.getvalue())

    def test_skipping_push_leaves_origin_untouched(self):
        commit_file(self.upstream_dir, "a.txt", "a\n", "Upstream one")
        origin_before = git(self.origin_dir, "rev-parse", "master")

        outcome = self.run_sync([True, False])

        self.assertEqual(outcome.exit_code, 0, self.output.getvalue())
        self.assertEqual(outcome.state, SyncState.PUSH_SKIPPED)
        self.assertEqual(self.subjects(self.fork_dir)[:2], ["Local change", "Upstream one"])
        self.assertEqual(git(self.origin_dir, "rev-parse", "master"), origin_before)
        self.assertTrue(GitPythonBackend(self.fork_dir).rebase_in_progress())

    def test_rerun_during_stopped_rebase(self):
        """A second run while the rebase waits for the user gives rebase guidance."""
        commit_file(self.fork_dir, "README.md", "# Fork title\n", "Fork README")
        commit_file(self.upstream_dir, "README.md", "# Upstream title\n", "Upstream README")
        self.run_sync([True])

        (self.fork_dir / "README.md").write_text("# Merged title\n")
        git(self.fork_dir, "add", "README.md")
        self.output = io.StringIO()

        outcome = self.run_sync([])

        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.result.error_code, SyncErrorCode.REBASE_CONFLICT)
        self.assertIn("git rebase --continue", self.output.getvalue())
        self.assertIn("git rebase --abort", self.output.getvalue())
        self.assertNotIn("git checkout", self.output.getvalue())

        git(self.fork_dir, "rebase", "--abort")
        self.assertFalse(GitPythonBackend(self.fork_dir).rebase_in_progress())

    def test_dirty_fork_is_rejected(self):
        (self.fork_dir / "README.md").write_text("# Edited\n")

        outcome = self.run_sync([])

        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.result.error_code, SyncErrorCode.DIRTY_WORKING_TREE)
        self.assertNotIn("upstream", git(self.fork_dir, "remote").splitlines())

    def test_conflicting_rebase_is_left_for_the_user(self):
        commit_file(self.fork_dir, "README.md", "# Fork title\n", "Fork README")
        commit_file(self.upstream_dir, "README.md", "# Upstream title\n", "Upstream README")
        origin_before = git(self.origin_dir, "rev-parse", "master")

        outcome = self.run_sync([True])

        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.result.error_code, SyncErrorCode.REBASE_CONFLICT)
        self.assertIn("git rebase --continue", self.output.getvalue())
        self.assertEqual(git(self.origin_dir, "rev-parse", "master"), origin_before)

    def test_unreachable_upstream_fails_fetch(self):
        context = SyncContext(
            backend=GitPythonBackend(self.fork_dir),
            console=Console(self.output, use_color=False),
            confirm=scripted_confirm([]),
            config=Config(),
        )
        missing = self.temp_dir / "does-not-exist"

        outcome = SyncOrchestrator(context).run(str(missing))

        self.assertEqual(outcome.exit_code, 1)
        self.assertEqual(outcome.result.error_code, SyncErrorCode.REMOTE_FETCH_FAILURE)
        self.assertTrue(outcome.result.details)


class TestCommandLine(unittest.TestCase):
    """Test cases for argument parsing and the main entry point."""

    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        self.assertIsNone(args.upstream_url)
        self.assertEqual(args.repo, ".")
        self.assertFalse(args.no_color)

    def test_parser_accepts_url(self):
        args = build_parser().parse_args(["https://github.com/a/b.git", "--no-color"])

        self.assertEqual(args.upstream_url, "https://github.com/a/b.git")
        self.assertTrue(args.no_color)

    def test_parser_rejects_two_urls(self):
        with patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(["one", "two"])

    @patch('forksync.config.load_dotenv')
    def test_main_outside_repository(self, mock_dotenv):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch('sys.stdout', new_callable=io.StringIO) as stdout:
                exit_code = main(["--repo", temp_dir, "--no-color"])

        self.assertEqual(exit_code, 1)
        self.assertIn("Error: Not in a git repository", stdout.getvalue())

    @patch('forksync.config.load_dotenv')
    def test_main_reports_interrupt(self, mock_dotenv):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch('forksync.cli.SyncOrchestrator.run', side_effect=KeyboardInterrupt):
                with patch('sys.stdout', new_callable=io.StringIO) as stdout:
                    exit_code = main(["--repo", temp_dir, "--no-color"])

        self.assertEqual(exit_code, 1)
        self.assertIn("Interrupted", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
