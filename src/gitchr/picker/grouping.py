"""Grouping and summaries of commits by conventional-commit prefix."""

from collections import Counter
from typing import Dict, List, Sequence

from gitchr.models import CommitGroup, CommitRecord, CommitSummary

OTHER_PREFIX = "other:"


def message_prefix(message: str) -> str:
    """Extract the conventional prefix of a message ("feat:", "fix:", ...).

    Messages whose subject has no colon fall into "other:".
    """
    subject = message.split("\n", 1)[0]
    if ":" not in subject:
        return OTHER_PREFIX
    return subject.split(":", 1)[0].strip() + ":"


def group_commits_by_message(commits: Sequence[CommitRecord]) -> List[CommitGroup]:
    """Group commits by message prefix, keeping first-seen group order."""
    groups: Dict[str, List[CommitRecord]] = {}
    for commit in commits:
        groups.setdefault(message_prefix(commit.message), []).append(commit)

    return [CommitGroup(title=title, commits=members) for title, members in groups.items()]


def summarize_commits(commits: Sequence[CommitRecord]) -> CommitSummary:
    """Count commits per author and per message prefix."""
    by_author = Counter(commit.author for commit in commits)
    by_type = Counter(message_prefix(commit.message) for commit in commits)
    return CommitSummary(total=len(commits), by_author=dict(by_author), by_type=dict(by_type))
