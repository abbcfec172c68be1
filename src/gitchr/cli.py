"""Command-line interface for gitchr."""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
import typer
from pydantic import ValidationError

from gitchr import __version__
from gitchr.display import CommitPrinter
from gitchr.errors import GitChrError
from gitchr.extraction import GitRepository
from gitchr.models import Settings, load_settings
from gitchr.picker import DateFilter, summarize_commits
from gitchr.picker.filters import DATE_FORMAT
from gitchr.sync import CardSync

app = typer.Typer(
    name="chr",
    help="Cherry-pick card commits from the production branch to the homologation branch",
    add_completion=False,
)

DATE_FORMATS = [DATE_FORMAT]


@dataclass
class CLIState:
    """Options shared by every command."""

    settings: Settings
    printer: CommitPrinter
    repo_path: Path


def setup_logging(level: str) -> None:
    """Send gitchr logs to stderr at the given level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("gitchr").setLevel(numeric_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def build_date_filter(
    today: bool,
    yesterday: bool,
    since: Optional[datetime],
    until: Optional[datetime],
) -> Optional[DateFilter]:
    """Turn the date options of ``show`` into a DateFilter.

    --since and --until together form an inclusive range.

    Raises:
        typer.BadParameter: If the options contradict each other
    """
    relative = [name for name, flag in (("--today", today), ("--yesterday", yesterday)) if flag]
    absolute = [name for name, value in (("--since", since), ("--until", until)) if value]
    if len(relative) > 1 or (relative and absolute):
        raise typer.BadParameter(f"{' and '.join(relative + absolute)} cannot be combined")

    if today:
        return DateFilter.today()
    if yesterday:
        return DateFilter.yesterday()
    if since and until:
        try:
            return DateFilter.between(since.date(), until.date())
        except ValidationError:
            raise typer.BadParameter(f"--since {since.date()} is after --until {until.date()}") from None
    if since:
        return DateFilter.since_date(since.date())
    if until:
        return DateFilter.until_date(until.date())
    return None


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    repo_path: Path = typer.Option(Path("."), "--repo", "-C", help="Path to the Git repository"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="TOML configuration file"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose diagnostics on stderr"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version information"),
) -> None:
    """Show commits missing on the homologation branch (default command)."""
    if version:
        typer.echo(f"chr version {__version__}")
        raise typer.Exit()

    try:
        settings = load_settings(config_file)
    except ValidationError as e:
        CommitPrinter(color=not no_color).error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level)
    printer = CommitPrinter(color=settings.color and not no_color)
    ctx.obj = CLIState(settings=settings, printer=printer, repo_path=repo_path)

    if ctx.invoked_subcommand is None:
        run_show(ctx.obj)


@app.command()
def show(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(None, "--count", "-c", help="Number of PRD commits to inspect"),
    pick: bool = typer.Option(False, "--pick", help="Actually cherry-pick commits (default is dry-run)"),
    today: bool = typer.Option(False, "--today", help="Only commits from today"),
    yesterday: bool = typer.Option(False, "--yesterday", help="Only commits from yesterday"),
    since: Optional[datetime] = typer.Option(None, "--since", formats=DATE_FORMATS, help="Only commits since date (YYYY-MM-DD)"),
    until: Optional[datetime] = typer.Option(None, "--until", formats=DATE_FORMATS, help="Only commits until date (YYYY-MM-DD)"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Confirm each commit before picking"),
    all_authors: bool = typer.Option(False, "--all-authors", help="Include commits from every author"),
    summary: bool = typer.Option(False, "--summary", "-s", help="Group commits by type and show totals"),
) -> None:
    """Show (and optionally cherry-pick) PRD commits missing on the HML branch."""
    date_filter = build_date_filter(today, yesterday, since, until)
    run_show(
        ctx.obj,
        count=count,
        pick=pick,
        date_filter=date_filter,
        interactive=interactive,
        all_authors=all_authors,
        summary=summary,
    )


def run_show(
    state: CLIState,
    count: Optional[int] = None,
    pick: bool = False,
    date_filter: Optional[DateFilter] = None,
    interactive: bool = False,
    all_authors: bool = False,
    summary: bool = False,
) -> None:
    """Body of the ``show`` command, also used when no command is given."""
    printer = state.printer
    try:
        client = GitRepository(state.repo_path, remote=state.settings.remote)
        sync = CardSync(client, state.settings)
        report = sync.inspect(count=count, date_filter=date_filter, author=None if all_authors else "")

        printer.print(f"Current branch: {report.current_branch}")
        printer.print(f"PRD branch: {report.branches.prd} ({report.prd_ref.ref})")
        printer.print(f"HML branch: {report.branches.hml} ({report.hml_ref.ref})")

        if not report.prd_commits:
            printer.print("No new commits found in PRD branch.")
            return
        if not report.candidates:
            printer.print("No commits found for the current user with the specified filters.")
            return
        if not report.unpicked:
            printer.print("All commits have already been picked to HML branch.", style="green")
            return

        printer.print(f"\nFound {len(report.unpicked)} unpicked commits:", style="bold")
        if summary:
            printer.groups(report.unpicked, report.author)
            printer.summary(summarize_commits(report.unpicked))
        else:
            printer.commits(report.unpicked, report.author)

        if not pick:
            printer.print("\nDry-run mode. Use --pick to actually cherry-pick these commits.", style="dim")
            return

        selected = report.unpicked
        if interactive:
            selected = [
                commit
                for commit in report.unpicked
                if typer.confirm(f"Pick {commit.hash} {commit.subject}?", default=True)
            ]
            if not selected:
                printer.print("No commits selected.")
                return

        printer.print(f"\nCherry-picking {len(selected)} commits onto {report.branches.hml}...")
        result = sync.pick(selected, target_branch=report.branches.hml)
        printer.replay_result(result)
        if not result.succeeded:
            raise typer.Exit(1)

    except GitChrError as e:
        printer.error(str(e))
        raise typer.Exit(1)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    state: CLIState = ctx.obj
    settings = state.settings
    source = settings.config_file if settings.config_file.exists() else "defaults and environment"

    state.printer.print(f"Configuration ({source}):", style="bold")
    for key, value in settings.model_dump().items():
        state.printer.print(f"  {key} = {value}")


@app.command()
def start(
    ctx: typer.Context,
    card_number: Optional[str] = typer.Argument(None, help="Card number"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip the uncommitted changes check"),
    no_pull: bool = typer.Option(False, "--no-pull", help="Do not update the base branch first"),
) -> None:
    """Start a new card: create its PRD branch from the base branch."""
    state: CLIState = ctx.obj
    if card_number is None:
        card_number = typer.prompt("Card number?")
    if not card_number.strip().isdigit():
        raise typer.BadParameter("Please enter a valid number", param_hint="CARD_NUMBER")

    try:
        client = GitRepository(state.repo_path, remote=state.settings.remote)
        branch = CardSync(client, state.settings).start(card_number.strip(), pull=not no_pull, force=force)
    except GitChrError as e:
        state.printer.error(str(e))
        raise typer.Exit(1)

    state.printer.print(f"Switched to new branch {branch}", style="bold green")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"chr version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
