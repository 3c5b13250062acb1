"""Configuration management for forksync."""

import os
import logging
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


DEFAULT_UPSTREAM_URL = "https://github.com/sec-deadlines/sec-deadlines.github.io.git"


@dataclass
class Config:
    """Configuration class for forksync with validation and defaults."""

    # Remotes
    default_upstream_url: str = DEFAULT_UPSTREAM_URL
    upstream_remote: str = "upstream"
    origin_remote: str = "origin"

    # Main line that local commits are rebased onto
    upstream_branch: str = "master"

    # Output
    use_color: bool = True
    log_limit: int = 5

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.log_level = self.log_level.upper()

        # Validate log level
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {valid_log_levels}")

        # Remote and branch names end up in git command lines
        for field_name in ("upstream_remote", "origin_remote", "upstream_branch"):
            value = getattr(self, field_name)
            if not value or any(ch.isspace() for ch in value):
                raise ValueError(f"{field_name} must be a non-empty name without whitespace")

        if self.upstream_remote == self.origin_remote:
            raise ValueError("upstream_remote and origin_remote must differ")

        if not self.default_upstream_url:
            raise ValueError("default_upstream_url must not be empty")

        if self.log_limit <= 0:
            raise ValueError("log_limit must be positive")

    @property
    def upstream_ref(self) -> str:
        """Remote-tracking ref of the upstream main line, e.g. upstream/master."""
        return f"{self.upstream_remote}/{self.upstream_branch}"


def load_configuration() -> Config:
    """Load configuration from a .env file and environment variables."""
    load_dotenv()

    try:
        return Config(
            default_upstream_url=os.getenv("FORKSYNC_UPSTREAM_URL", DEFAULT_UPSTREAM_URL),
            upstream_remote=os.getenv("FORKSYNC_UPSTREAM_REMOTE", "upstream"),
            origin_remote=os.getenv("FORKSYNC_ORIGIN_REMOTE", "origin"),
            upstream_branch=os.getenv("FORKSYNC_UPSTREAM_BRANCH", "master"),
            use_color=os.getenv("NO_COLOR") is None,
            log_limit=int(os.getenv("FORKSYNC_LOG_LIMIT", "5")),
            log_level=os.getenv("FORKSYNC_LOG_LEVEL", "WARNING"),
        )
    except (ValueError, TypeError) as e:
        raise ValueError(f"Configuration error: {e}")


def looks_like_git_url(url: str) -> bool:
    """Check whether a string is plausibly something git can fetch from."""
    if url.startswith(("http://", "https://", "git@", "ssh://", "git://", "file://")):
        return True
    # Local paths are valid remotes too
    return os.path.isabs(url) or url.startswith(("./", "../", "~"))


def validate_configuration(config: Config) -> List[str]:
    """Validate configuration and return any warnings."""
    warnings = []

    if not looks_like_git_url(config.default_upstream_url):
        warnings.append(f"WARNING: Default upstream URL may be invalid: {config.default_upstream_url}")

    if config.upstream_branch != "master":
        logging.getLogger('forksync.config').info(
            f"Rebasing onto non-default upstream branch '{config.upstream_branch}'"
        )

    if config.log_limit > 50:
        warnings.append("WARNING: High log_limit produces a long summary")

    return warnings
