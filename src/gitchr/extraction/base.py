"""Abstract interface to the version-control system."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from gitchr.models import CommitRecord, ReplayResult


class VCSClient(ABC):
    """Operations the picker needs from a repository.

    Implementations are bound to a single repository. The picker core never
    talks to git directly; tests substitute a fake for this interface.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def current_branch(self) -> str:
        """Name of the checked-out branch.

        Raises:
            GitChrError: If HEAD is not on a branch
        """

    @abstractmethod
    def current_user_name(self) -> str:
        """Configured author name (user.name)."""

    @abstractmethod
    def branch_exists(self, name: str) -> bool:
        """Check whether ``name`` resolves to a commit. Never raises."""

    @abstractmethod
    def local_branch_exists(self, name: str) -> bool:
        """Check whether a local branch called ``name`` exists."""

    @abstractmethod
    def default_remote(self) -> Optional[str]:
        """Remote to fetch from, or None when the repository has no remote."""

    @abstractmethod
    def remote_branch_exists(self, remote: str, name: str) -> bool:
        """Check whether the remote-tracking branch ``remote/name`` exists."""

    @abstractmethod
    def list_commits(
        self, exclude_ref: Optional[str], include_ref: str, limit: int
    ) -> List[CommitRecord]:
        """Commits reachable from ``include_ref`` but not from ``exclude_ref``.

        Args:
            exclude_ref: Reference whose history is excluded (None: exclude nothing)
            include_ref: Reference to list commits from
            limit: Maximum number of commits; zero or less means unbounded

        Returns:
            Commits, newest first
        """

    @abstractmethod
    def is_clean(self) -> bool:
        """Check whether the working tree has no uncommitted changes."""

    # ============================================================================
    # Mutating Operations
    # ============================================================================

    @abstractmethod
    def fetch(self, remote: str) -> None:
        """Update remote-tracking branches of ``remote``."""

    @abstractmethod
    def replay(self, hashes: Sequence[str]) -> ReplayResult:
        """Cherry-pick commits onto the current branch in the given order.

        Stops at the first conflict and reports it in the result. Commits
        whose changes are already on the branch are skipped.

        Raises:
            ReplayError: If a commit is missing or fails for a reason other
                than a content conflict; an interrupted pick is aborted first
        """

    @abstractmethod
    def switch(self, name: str, create: bool = False) -> None:
        """Check out branch ``name``, creating it from HEAD if requested."""

    @abstractmethod
    def pull(self) -> None:
        """Pull the current branch from its upstream."""
