"""Rebase-safe commit matching, filtering and replay planning."""

from gitchr.picker.filters import DateFilter, DateFilterKind, filter_by_author, filter_by_date, parse_date
from gitchr.picker.grouping import group_commits_by_message, message_prefix, summarize_commits
from gitchr.picker.matcher import CommitMatcher, find_matches, signature, unmatched, unpicked_commits
from gitchr.picker.refs import RefKind, RefResolver, ResolvedRef
from gitchr.picker.replay import ReplayPlanner

__all__ = [
    "signature",
    "CommitMatcher",
    "find_matches",
    "unmatched",
    "unpicked_commits",
    "DateFilter",
    "DateFilterKind",
    "filter_by_author",
    "filter_by_date",
    "parse_date",
    "group_commits_by_message",
    "message_prefix",
    "summarize_commits",
    "RefKind",
    "RefResolver",
    "ResolvedRef",
    "ReplayPlanner",
]
