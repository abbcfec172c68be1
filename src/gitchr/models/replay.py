"""Data models for replaying commits onto a branch."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReplayStatus(str, Enum):
    """Outcome of a replay."""

    SUCCESS = "success"
    CONFLICT = "conflict"


class ReplayPlan(BaseModel):
    """Commits to replay, oldest first."""

    model_config = ConfigDict(frozen=True)

    hashes: List[str] = Field(default_factory=list, description="Commit hashes in application order")

    def __len__(self) -> int:
        return len(self.hashes)


class ReplayResult(BaseModel):
    """Result of replaying a list of commits.

    A conflict is not an error: the working tree is left mid cherry-pick and
    the caller decides how to continue.
    """

    status: ReplayStatus = Field(ReplayStatus.SUCCESS, description="success or conflict")
    applied: List[str] = Field(default_factory=list, description="Hashes applied cleanly")
    skipped: List[str] = Field(default_factory=list, description="Hashes whose changes were already on the branch")
    pending: List[str] = Field(default_factory=list, description="Hashes not applied yet (after the conflicting one)")
    conflicting_commit: Optional[str] = Field(None, description="Hash that stopped the replay")
    conflicted_files: List[str] = Field(default_factory=list, description="Files with unresolved conflicts")

    @property
    def succeeded(self) -> bool:
        return self.status == ReplayStatus.SUCCESS

    def next_steps(self) -> List[str]:
        """Instructions for finishing or abandoning an interrupted replay."""
        if self.succeeded:
            return []

        steps = [
            "Resolve the conflicts in the files listed above",
            "Stage the resolved files: git add <file>",
            "Continue the cherry-pick: git cherry-pick --continue",
        ]
        if self.pending:
            steps.append(f"Then pick the remaining commits: git cherry-pick {' '.join(self.pending)}")
        steps.append("Or abort and restore the branch: git cherry-pick --abort")
        return steps
