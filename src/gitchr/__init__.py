"""gitchr: rebase-safe cherry-picking between card branches."""

__version__ = "0.1.0"
