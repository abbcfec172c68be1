"""Unit tests for terminal output."""

import io

from rich.console import Console

from gitchr.display import CommitPrinter
from gitchr.models import CommitRecord, CommitSummary, ReplayResult, ReplayStatus


def make_printer(color):
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=not color, force_terminal=color, width=120, highlight=False)
    return CommitPrinter(color=color, console=console), buffer


COMMIT = CommitRecord(hash="abc1234", author="Ana", message="feat: add [login]\n\nbody", date="2024-01-02")


def test_plain_commit_line():
    """Test the uncolored line layout."""
    printer, _ = make_printer(color=False)

    line = printer.commit_line(1, COMMIT, current_user="Ana")

    assert line.plain == "1. abc1234 | Ana | 2024-01-02 | feat: add [login]"
    assert not line.spans


def test_colored_commit_line_styles():
    """Test authors and prefixes get their colors."""
    printer, _ = make_printer(color=True)

    own = printer.commit_line(1, COMMIT, current_user="Ana")
    other = printer.commit_line(1, COMMIT, current_user="Bob")

    assert own.plain == other.plain
    assert "green" in [str(span.style) for span in own.spans]
    assert "red" in [str(span.style) for span in other.spans]


def test_no_color_output_has_no_escape_codes():
    """Test disabled colors produce plain text."""
    printer, buffer = make_printer(color=False)

    printer.commits([COMMIT])
    printer.error("boom")

    output = buffer.getvalue()
    assert "\x1b[" not in output
    assert "1. abc1234 | Ana | 2024-01-02 | feat: add [login]" in output
    assert "Error: boom" in output


def test_groups_and_summary():
    """Test grouped listing and summary table."""
    printer, buffer = make_printer(color=False)
    fix = CommitRecord(hash="def5678", author="Bob", message="fix: crash", date="2024-01-03")

    printer.groups([COMMIT, fix])
    printer.summary(CommitSummary(total=2, by_author={"Ana": 1, "Bob": 1}, by_type={"feat:": 1, "fix:": 1}))

    output = buffer.getvalue()
    assert "feat: (1)" in output
    assert "2. def5678 | Bob" in output
    assert "total" in output


def test_conflict_report():
    """Test conflicts list files and next steps."""
    printer, buffer = make_printer(color=False)
    result = ReplayResult(
        status=ReplayStatus.CONFLICT,
        applied=["aaa1111"],
        pending=["ccc3333"],
        conflicting_commit="bbb2222",
        conflicted_files=["src/app.py"],
    )

    printer.replay_result(result)

    output = buffer.getvalue()
    assert "Conflict while cherry-picking bbb2222" in output
    assert "src/app.py" in output
    assert "git cherry-pick --continue" in output
    assert "git cherry-pick --abort" in output


def test_skipped_commits_are_reported():
    """Test commits already on the branch are listed after a replay."""
    printer, buffer = make_printer(color=False)

    printer.replay_result(ReplayResult(applied=["aaa1111"], skipped=["bbb2222"]))

    output = buffer.getvalue()
    assert "Skipped (already on the branch): bbb2222" in output
    assert "Successfully cherry-picked 1 commits!" in output
