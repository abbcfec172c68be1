"""Terminal rendering of commits, summaries and replay results."""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gitchr.models import CommitRecord, CommitSummary, ReplayResult
from gitchr.picker.grouping import group_commits_by_message

PREFIX_STYLES = {
    "feat:": "green",
    "fix:": "red",
    "docs:": "cyan",
    "refactor:": "magenta",
}


class CommitPrinter:
    """Prints gitchr output, with or without colors.

    Colors are a property of the printer, so callers decide per invocation
    instead of flipping process-wide state.
    """

    def __init__(self, color: bool = True, console: Optional[Console] = None) -> None:
        self.color = color
        self.console = console or Console(no_color=not color, highlight=False)

    def print(self, message: str = "", style: Optional[str] = None) -> None:
        self.console.print(Text(message, style=(style or "") if self.color else ""))

    def error(self, message: str) -> None:
        self.console.print(Text.assemble(("Error:", "bold red" if self.color else ""), f" {message}"))

    def commit_line(self, index: int, commit: CommitRecord, current_user: Optional[str] = None) -> Text:
        """Render ``N. hash | author | date | subject``."""
        if not self.color:
            return Text(f"{index}. {commit.hash} | {commit.author} | {commit.date} | {commit.subject}")

        author_style = "green" if current_user is None or commit.author == current_user else "red"
        message_style = "white"
        for prefix, style in PREFIX_STYLES.items():
            if commit.subject.startswith(prefix):
                message_style = style
                break

        return Text.assemble(
            (f"{index}.", "bold cyan"),
            " ",
            (commit.hash, "yellow"),
            " | ",
            (commit.author, author_style),
            " | ",
            (commit.date, "blue"),
            " | ",
            (commit.subject, message_style),
        )

    def commits(self, commits: Sequence[CommitRecord], current_user: Optional[str] = None) -> None:
        for index, commit in enumerate(commits, start=1):
            self.console.print(self.commit_line(index, commit, current_user))

    def groups(self, commits: Sequence[CommitRecord], current_user: Optional[str] = None) -> None:
        """Print commits grouped by conventional prefix."""
        index = 1
        for group in group_commits_by_message(commits):
            self.print(f"\n{group.title} ({len(group.commits)})", style="bold")
            for commit in group.commits:
                self.console.print(self.commit_line(index, commit, current_user))
                index += 1

    def summary(self, summary: CommitSummary) -> None:
        table = Table(show_header=True, header_style="bold magenta" if self.color else None)
        table.add_column("Kind")
        table.add_column("Name")
        table.add_column("Commits", justify="right")

        for author, total in sorted(summary.by_author.items()):
            table.add_row("author", author, str(total))
        for prefix, total in sorted(summary.by_type.items()):
            table.add_row("type", prefix, str(total))
        table.add_row("total", "", str(summary.total))
        self.console.print(table)

    def replay_result(self, result: ReplayResult) -> None:
        if result.skipped:
            self.print(f"Skipped (already on the branch): {', '.join(result.skipped)}", style="yellow")
        if result.succeeded:
            self.print(f"Successfully cherry-picked {len(result.applied)} commits!", style="bold green")
            return

        self.print(f"Conflict while cherry-picking {result.conflicting_commit}", style="bold red")
        if result.applied:
            self.print(f"Applied before the conflict: {', '.join(result.applied)}")
        if result.conflicted_files:
            self.print("Files in conflict:", style="bold")
            for path in result.conflicted_files:
                self.print(f"  - {path}", style="yellow")
        self.print("\nNext steps:", style="bold")
        for step_number, step in enumerate(result.next_steps(), start=1):
            self.print(f"  {step_number}. {step}")
