"""Author and date filters over commit records."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from gitchr.models import CommitRecord

logger = structlog.get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class DateFilterKind(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    SINCE = "since"
    UNTIL = "until"
    RANGE = "range"


class DateFilter(BaseModel):
    """A window of calendar days.

    ``today`` and ``yesterday`` are half-open windows [since, until);
    ``since``, ``until`` and ``range`` are inclusive at both ends.
    Use the classmethod constructors rather than building one by hand.
    """

    model_config = ConfigDict(frozen=True)

    kind: DateFilterKind
    since: Optional[date] = Field(None, description="Lower bound")
    until: Optional[date] = Field(None, description="Upper bound")

    @model_validator(mode="after")
    def _check_bounds(self) -> "DateFilter":
        needs_since = self.kind != DateFilterKind.UNTIL
        needs_until = self.kind != DateFilterKind.SINCE
        if needs_since and self.since is None:
            raise ValueError(f"{self.kind.value} filter needs a start date")
        if needs_until and self.until is None:
            raise ValueError(f"{self.kind.value} filter needs an end date")
        if self.since is not None and self.until is not None and self.since > self.until:
            raise ValueError(f"start date {self.since} is after end date {self.until}")
        return self

    @classmethod
    def today(cls, reference: Optional[date] = None) -> "DateFilter":
        day = reference or date.today()
        return cls(kind=DateFilterKind.TODAY, since=day, until=day + timedelta(days=1))

    @classmethod
    def yesterday(cls, reference: Optional[date] = None) -> "DateFilter":
        day = reference or date.today()
        return cls(kind=DateFilterKind.YESTERDAY, since=day - timedelta(days=1), until=day)

    @classmethod
    def since_date(cls, since: date) -> "DateFilter":
        return cls(kind=DateFilterKind.SINCE, since=since)

    @classmethod
    def until_date(cls, until: date) -> "DateFilter":
        return cls(kind=DateFilterKind.UNTIL, until=until)

    @classmethod
    def between(cls, since: date, until: date) -> "DateFilter":
        return cls(kind=DateFilterKind.RANGE, since=since, until=until)

    def contains(self, day: date) -> bool:
        """Check whether a calendar day falls inside the window."""
        if self.kind in (DateFilterKind.TODAY, DateFilterKind.YESTERDAY):
            return self.since <= day < self.until
        if self.kind == DateFilterKind.SINCE:
            return day >= self.since
        if self.kind == DateFilterKind.UNTIL:
            return day <= self.until
        return self.since <= day <= self.until


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD date.

    Raises:
        ValueError: If the value is not a valid calendar date
    """
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def filter_by_author(commits: Sequence[CommitRecord], author: str) -> List[CommitRecord]:
    """Keep commits whose author name equals ``author``."""
    return [commit for commit in commits if commit.author == author]


def filter_by_date(
    commits: Sequence[CommitRecord], date_filter: Optional[DateFilter]
) -> List[CommitRecord]:
    """Keep commits whose date falls inside the filter window.

    Commits with a date that does not parse are skipped. Without a filter
    every commit is kept.

    Args:
        commits: Commits to filter
        date_filter: Date window, or None for no filtering

    Returns:
        Matching commits in their original order
    """
    if date_filter is None:
        return list(commits)

    filtered = []
    for commit in commits:
        try:
            day = parse_date(commit.date)
        except ValueError:
            logger.debug("commit_date_unparseable", commit=commit.hash, date=commit.date)
            continue
        if date_filter.contains(day):
            filtered.append(commit)
    return filtered
