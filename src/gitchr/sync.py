"""Selection of PRD commits that still have to reach the HML branch."""

from typing import List, Optional, Sequence

import structlog
from pydantic import BaseModel, Field

from gitchr.branches import CardBranches, parse_card_number
from gitchr.errors import GitCommandFailed, RefResolutionError, WorkingTreeDirtyError
from gitchr.extraction import VCSClient
from gitchr.models import CommitRecord, ReplayResult, Settings
from gitchr.picker import (
    DateFilter,
    RefKind,
    RefResolver,
    ReplayPlanner,
    ResolvedRef,
    filter_by_author,
    filter_by_date,
    unpicked_commits,
)

logger = structlog.get_logger(__name__)


class SyncReport(BaseModel):
    """Everything ``CardSync.inspect`` looked at and what it selected."""

    current_branch: str
    branches: CardBranches
    prd_ref: ResolvedRef
    hml_ref: ResolvedRef
    author: Optional[str] = Field(None, description="Author filter, None when disabled")
    prd_commits: List[CommitRecord] = Field(default_factory=list, description="PRD commits missing from HML history")
    candidates: List[CommitRecord] = Field(default_factory=list, description="PRD commits left after author/date filters")
    hml_commits: List[CommitRecord] = Field(default_factory=list, description="HML history used for matching")
    unpicked: List[CommitRecord] = Field(default_factory=list, description="Candidates not yet on HML")

    @property
    def already_picked(self) -> List[CommitRecord]:
        unpicked = {commit.hash for commit in self.unpicked}
        return [commit for commit in self.candidates if commit.hash not in unpicked]


class CardSync:
    """Finds and cherry-picks PRD commits that are missing on the HML branch."""

    def __init__(
        self,
        client: VCSClient,
        settings: Settings,
        resolver: Optional[RefResolver] = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.resolver = resolver or RefResolver(client)
        self.planner = ReplayPlanner(client)

    def card_branches(self, current: Optional[str] = None) -> CardBranches:
        """Derive the card branches from the checked-out (or given) branch."""
        if current is None:
            current = self.client.current_branch()
        card_number = parse_card_number(current, self.settings.prefix)
        return CardBranches.for_card(card_number, self.settings)

    def inspect(
        self,
        count: Optional[int] = None,
        date_filter: Optional[DateFilter] = None,
        author: Optional[str] = "",
    ) -> SyncReport:
        """Select the PRD commits that have not been picked to HML yet.

        Author and date filters are applied to the PRD commits before they are
        compared with the full HML history.

        Args:
            count: Number of PRD commits to inspect (default from settings)
            date_filter: Optional date window for PRD commits
            author: Author to keep; "" means the current git user, None disables
                the author filter

        Returns:
            SyncReport

        Raises:
            BranchNameError: If the current branch is not a card branch
            RefResolutionError: If a card branch cannot be read
        """
        current = self.client.current_branch()
        branches = self.card_branches(current)
        prd_ref = self._require(self.resolver.resolve(branches.prd))
        hml_ref = self._require(self.resolver.resolve(branches.hml))
        limit = self.settings.count if count is None else count

        logger.info("card_sync_inspect", card=branches.card_number, prd=prd_ref.ref, hml=hml_ref.ref)
        prd_commits = self._list(hml_ref.ref, prd_ref, limit)

        if author == "":
            author = self.client.current_user_name()
        candidates = filter_by_author(prd_commits, author) if author is not None else list(prd_commits)
        candidates = filter_by_date(candidates, date_filter)

        report = SyncReport(
            current_branch=current,
            branches=branches,
            prd_ref=prd_ref,
            hml_ref=hml_ref,
            author=author,
            prd_commits=prd_commits,
            candidates=candidates,
        )
        if not candidates:
            return report

        hml_commits = self._list(self._base_ref(), hml_ref, self.settings.target_history_limit)
        report.hml_commits = hml_commits
        report.unpicked = unpicked_commits(report.candidates, hml_commits)
        return report

    def pick(self, commits: Sequence[CommitRecord], target_branch: Optional[str] = None) -> ReplayResult:
        """Cherry-pick commits onto the target branch.

        Args:
            commits: Commits newest first, as listed by ``inspect``
            target_branch: Branch to check out first (None: current branch)

        Raises:
            WorkingTreeDirtyError: If a branch switch is needed on a dirty tree
            ReplayError: If a commit cannot be applied for a reason other than a conflict
        """
        if target_branch and self.client.current_branch() != target_branch:
            if not self.client.is_clean():
                raise WorkingTreeDirtyError(
                    f"Cannot switch to '{target_branch}': the working tree has uncommitted changes"
                )
            logger.info("switching_branch", branch=target_branch)
            self.client.switch(target_branch)
        return self.planner.replay(commits)

    def start(self, card_number: str, pull: bool = True, force: bool = False) -> str:
        """Create the PRD branch for a new card from the base branch.

        Args:
            card_number: Card identifier
            pull: Pull the base branch first when a remote exists; a failed
                update is logged and the branch is created anyway
            force: Skip the clean working tree check

        Returns:
            Name of the created branch

        Raises:
            WorkingTreeDirtyError: If there are uncommitted changes and force is False
        """
        if not force and not self.client.is_clean():
            raise WorkingTreeDirtyError(
                "You have uncommitted changes. Please commit them before starting a new card"
            )

        branch, _ = self.settings.card_branch_names(card_number)
        self.client.switch(self.settings.base_branch)
        if pull and self.resolver.remote is not None:
            try:
                self.client.fetch(self.resolver.remote)
                self.client.pull()
            except GitCommandFailed as e:
                logger.warning("base_branch_update_failed", branch=self.settings.base_branch, error=str(e))
        self.client.switch(branch, create=True)
        logger.info("card_started", card=card_number, branch=branch)
        return branch

    def _list(self, exclude_ref: Optional[str], include: ResolvedRef, limit: int) -> List[CommitRecord]:
        try:
            return self.client.list_commits(exclude_ref, include.ref, limit)
        except GitCommandFailed as e:
            raise RefResolutionError(include.name, include.ref, e.stderr) from e

    def _require(self, resolved: ResolvedRef) -> ResolvedRef:
        if resolved.kind == RefKind.LITERAL and not self.client.branch_exists(resolved.ref):
            raise RefResolutionError(resolved.name, resolved.ref, "no local or remote-tracking branch found")
        return resolved

    def _base_ref(self) -> Optional[str]:
        base = self.resolver.resolve(self.settings.base_branch)
        if base.kind == RefKind.LITERAL and not self.client.branch_exists(base.ref):
            logger.warning("base_branch_missing", branch=base.name)
            return None
        return base.ref
