"""Data models for commit records and cross-branch matches."""

from typing import Dict, List, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class CommitRecord(BaseModel):
    """One commit as reported by a history query.

    The short hash is only unique within a single listing. Rebases rewrite it,
    so it must never be used to recognise the same change on another branch.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "hash": "abc123d",
                "author": "Ana",
                "message": "feat: add card sync",
                "date": "2024-01-15",
            }
        },
    )

    hash: str = Field(..., description="Short commit hash")
    author: str = Field(..., description="Author display name")
    message: str = Field(..., description="Commit message (first line is the subject)")
    date: str = Field(..., description="Author date, YYYY-MM-DD")

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


class CommitSignature(NamedTuple):
    """Content identity of a commit: survives hash rewrites."""

    author: str
    date: str
    subject: str

    def __str__(self) -> str:
        return f"{self.author}:{self.date}:{self.subject}"


class CommitMatch(BaseModel):
    """A source commit paired with its equivalent on the target branch."""

    model_config = ConfigDict(frozen=True)

    source: CommitRecord = Field(..., description="Commit from the source (PRD) branch")
    target: CommitRecord = Field(..., description="Matching commit from the target (HML) branch")
    score: int = Field(..., ge=0, le=100, description="Match confidence")


class CommitGroup(BaseModel):
    """Commits sharing a conventional-commit prefix such as ``feat:``."""

    title: str
    commits: List[CommitRecord] = Field(default_factory=list)


class CommitSummary(BaseModel):
    """Counts of commits per author and per message type."""

    total: int = 0
    by_author: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)
