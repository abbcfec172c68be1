"""Version-control access for gitchr."""

from gitchr.extraction.base import VCSClient
from gitchr.extraction.git_client import GitRepository, parse_log_output

__all__ = ["VCSClient", "GitRepository", "parse_log_output"]
