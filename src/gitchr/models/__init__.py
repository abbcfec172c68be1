"""Data models for card branch synchronisation."""

from gitchr.models.commit import (
    CommitGroup,
    CommitMatch,
    CommitRecord,
    CommitSignature,
    CommitSummary,
)
from gitchr.models.config import Settings, load_settings
from gitchr.models.replay import ReplayPlan, ReplayResult, ReplayStatus

__all__ = [
    "CommitRecord",
    "CommitSignature",
    "CommitMatch",
    "CommitGroup",
    "CommitSummary",
    "Settings",
    "load_settings",
    "ReplayPlan",
    "ReplayResult",
    "ReplayStatus",
]
