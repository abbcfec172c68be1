"""Planning and execution of cherry-picks onto the homologation branch."""

from typing import Sequence

import structlog

from gitchr.extraction import VCSClient
from gitchr.models import CommitRecord, ReplayPlan, ReplayResult

logger = structlog.get_logger(__name__)


class ReplayPlanner:
    """Turns a selection of commits into an ordered replay and runs it."""

    def __init__(self, client: VCSClient) -> None:
        self.client = client

    def plan(self, commits: Sequence[CommitRecord]) -> ReplayPlan:
        """Order commits for application.

        Args:
            commits: Selected commits, newest first (history order)

        Returns:
            Plan with hashes oldest first
        """
        return ReplayPlan(hashes=[commit.hash for commit in reversed(commits)])

    def execute(self, plan: ReplayPlan) -> ReplayResult:
        """Apply the plan to the current branch.

        Stops at the first conflict, leaving the working tree mid cherry-pick.

        Raises:
            ReplayError: If a commit cannot be applied for another reason
        """
        if not plan.hashes:
            return ReplayResult()

        logger.info("replay_started", commits=len(plan))
        result = self.client.replay(plan.hashes)
        if result.succeeded:
            logger.info("replay_finished", applied=len(result.applied))
        else:
            logger.warning(
                "replay_conflict",
                commit=result.conflicting_commit,
                files=result.conflicted_files,
                pending=len(result.pending),
            )
        return result

    def replay(self, commits: Sequence[CommitRecord]) -> ReplayResult:
        """Plan and execute in one step."""
        return self.execute(self.plan(commits))
