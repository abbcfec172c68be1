"""Rebase-safe commit matching.

Cherry-picks and rebases give a commit a new hash, so commits are recognised
across branches by their content signature (author, date, subject) instead.
"""

from typing import List, Optional, Sequence

import structlog

from gitchr.models import CommitMatch, CommitRecord, CommitSignature

logger = structlog.get_logger(__name__)

EXACT_SCORE = 100
MESSAGE_SCORE = 80


def signature(commit: CommitRecord) -> CommitSignature:
    """Content identity of a commit.

    Two commits by the same author, on the same day, with the same first
    message line have equal signatures whatever their hashes.
    """
    return CommitSignature(commit.author, commit.date, commit.subject.strip())


class CommitMatcher:
    """Pairs source commits with equivalent commits on a target branch.

    Matching is first-match-wins in two tiers:

    1. exact: equal signature (score 100)
    2. message: same author and subject on a different date (score 80),
       which covers commits cherry-picked or re-dated on another day

    The exact tier is tried against the whole target list before the message
    tier. Target commits are not consumed, so one target commit can match
    several source commits.
    """

    def find_matches(
        self, source: Sequence[CommitRecord], target: Sequence[CommitRecord]
    ) -> List[CommitMatch]:
        """Find a match for each source commit.

        Args:
            source: Commits from the source branch, newest first
            target: Commits from the target branch, newest first

        Returns:
            Matches in source order
        """
        matches = []
        for commit in source:
            match = self.match_commit(commit, target)
            if match is not None:
                matches.append(match)

        logger.debug("commits_matched", source=len(source), target=len(target), matched=len(matches))
        return matches

    def get_unmatched(
        self, source: Sequence[CommitRecord], target: Sequence[CommitRecord]
    ) -> List[CommitRecord]:
        """Return source commits with no equivalent in target, in source order."""
        return [commit for commit in source if self.match_commit(commit, target) is None]

    def match_commit(
        self, commit: CommitRecord, target: Sequence[CommitRecord]
    ) -> Optional[CommitMatch]:
        """Find the best match for a single commit, or None."""
        wanted = signature(commit)

        for candidate in target:
            if signature(candidate) == wanted:
                return CommitMatch(source=commit, target=candidate, score=EXACT_SCORE)

        for candidate in target:
            other = signature(candidate)
            if (
                other.author == wanted.author
                and other.subject == wanted.subject
                and other.date != wanted.date
            ):
                logger.debug(
                    "commit_matched_by_message",
                    source=commit.hash,
                    target=candidate.hash,
                    source_date=commit.date,
                    target_date=candidate.date,
                )
                return CommitMatch(source=commit, target=candidate, score=MESSAGE_SCORE)

        return None


def find_matches(source: Sequence[CommitRecord], target: Sequence[CommitRecord]) -> List[CommitMatch]:
    """Find matches between source and target using the default matcher."""
    return CommitMatcher().find_matches(source, target)


def unmatched(source: Sequence[CommitRecord], target: Sequence[CommitRecord]) -> List[CommitRecord]:
    """Source commits without an equivalent in target."""
    return CommitMatcher().get_unmatched(source, target)


def unpicked_commits(
    source: Sequence[CommitRecord], target: Sequence[CommitRecord]
) -> List[CommitRecord]:
    """Commits from source that still have to be cherry-picked into target.

    Author and date filters must already have been applied to ``source``;
    ``target`` is the unfiltered target history. With no target history there
    is nothing to compare against, so every source commit is unpicked.

    Args:
        source: Candidate commits from the production branch
        target: Commits on the homologation branch

    Returns:
        Source commits not yet present on the target branch, in source order
    """
    if not target:
        return list(source)

    pending = CommitMatcher().get_unmatched(source, target)
    logger.info("unpicked_commits_selected", candidates=len(source), unpicked=len(pending))
    return pending
