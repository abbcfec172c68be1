"""Tests for the chr command-line interface."""

from datetime import datetime

import pytest
import typer
from typer.testing import CliRunner

from gitchr import __version__
from gitchr.cli import app, build_date_filter

runner = CliRunner()


@pytest.fixture
def base_args(card_repo, settings, tmp_path):
    """Global options pointing at the card repository with default settings."""
    return ["--repo", str(card_repo.path), "--config", str(tmp_path / "chr.toml"), "--no-color"]


def test_version():
    """Test the version flag."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"chr version {__version__}" in result.output


def test_show_dry_run(base_args, card_repo):
    """Test listing unpicked commits without picking them."""
    result = runner.invoke(app, base_args + ["show", "--count", "10"])

    assert result.exit_code == 0, result.output
    assert "Current branch: ZUP-123-hml" in result.output
    assert "Found 1 unpicked commits" in result.output
    assert f"1. {card_repo.hashes['export']} | Test User | 2024-01-04 | feat: export" in result.output
    assert "Dry-run mode" in result.output
    assert card_repo.repo.head.commit.summary == "fix: typo"


def test_show_is_default_command(base_args, card_repo):
    """Test running chr without a command shows commits."""
    result = runner.invoke(app, base_args)

    assert result.exit_code == 0, result.output
    assert "Found 1 unpicked commits" in result.output


def test_show_all_authors_summary(base_args):
    """Test grouping output across authors."""
    result = runner.invoke(app, base_args + ["show", "-c", "10", "--all-authors", "--summary"])

    assert result.exit_code == 0, result.output
    assert "Found 2 unpicked commits" in result.output
    assert "feat: (1)" in result.output
    assert "docs: (1)" in result.output


def test_show_pick(base_args, card_repo):
    """Test cherry-picking the unpicked commits."""
    result = runner.invoke(app, base_args + ["show", "-c", "10", "--pick"])

    assert result.exit_code == 0, result.output
    assert "Successfully cherry-picked 1 commits!" in result.output
    assert card_repo.repo.head.commit.summary == "feat: export"

    again = runner.invoke(app, base_args + ["show", "-c", "10"])
    assert "All commits have already been picked to HML branch." in again.output


def test_show_pick_interactive_decline(base_args, card_repo):
    """Test declining every commit picks nothing."""
    result = runner.invoke(app, base_args + ["show", "-c", "10", "--pick", "-i"], input="n\n")

    assert result.exit_code == 0, result.output
    assert "No commits selected." in result.output
    assert card_repo.repo.head.commit.summary == "fix: typo"


def test_show_date_filters(base_args):
    """Test a date window that excludes every commit."""
    result = runner.invoke(app, base_args + ["show", "-c", "10", "--since", "2024-02-01"])

    assert result.exit_code == 0, result.output
    assert "No commits found for the current user with the specified filters." in result.output


@pytest.mark.parametrize(
    "options",
    [
        ["--since", "2024-13-01"],
        ["--until", "yesterday"],
        ["--today", "--yesterday"],
        ["--today", "--since", "2024-01-01"],
        ["--since", "2024-02-01", "--until", "2024-01-01"],
    ],
)
def test_show_invalid_date_options(base_args, options):
    """Test bad or conflicting date options are usage errors."""
    result = runner.invoke(app, base_args + ["show"] + options)

    assert result.exit_code == 2


def test_reversed_range_error_has_no_chained_cause():
    """Test the range error is reported on its own, without the validation traceback."""
    with pytest.raises(typer.BadParameter, match="is after --until") as excinfo:
        build_date_filter(False, False, datetime(2024, 2, 1), datetime(2024, 1, 1))

    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__


def test_show_outside_card_branch(base_args, card_repo):
    """Test a clear error when not on a card branch."""
    card_repo.repo.git.checkout("main")

    result = runner.invoke(app, base_args + ["show"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "doesn't start with prefix 'ZUP-'" in result.output


def test_show_conflict(base_args, card_repo, git_commit):
    """Test a conflict exits with status 1 and explains the next steps."""
    card_repo.repo.git.checkout("ZUP-123-prd")
    git_commit(card_repo.repo, "export.py", "def export(): return 1\n", "fix: export value", "2024-01-06")
    card_repo.repo.git.checkout("ZUP-123-hml")
    git_commit(card_repo.repo, "export.py", "def export(): return 2\n", "feat: hml export", "2024-01-06")

    result = runner.invoke(app, base_args + ["show", "-c", "10", "--pick"])

    assert result.exit_code == 1
    assert "Conflict while cherry-picking" in result.output
    assert "export.py" in result.output
    assert "git cherry-pick --abort" in result.output


def test_show_pick_skips_changes_already_on_hml(base_args, card_repo, git_commit):
    """Test a commit whose changes HML already has is skipped, not an error."""
    git_commit(card_repo.repo, "export.py", "def export(): pass\n", "feat: export for hml", "2024-01-04")

    result = runner.invoke(app, base_args + ["show", "-c", "10", "--pick"])

    assert result.exit_code == 0, result.output
    assert f"Skipped (already on the branch): {card_repo.hashes['export']}" in result.output
    assert card_repo.repo.head.commit.summary == "feat: export for hml"


def test_config_shows_settings(base_args):
    """Test the effective configuration is printed."""
    result = runner.invoke(app, base_args + ["config"])

    assert result.exit_code == 0, result.output
    assert "prefix = ZUP-" in result.output
    assert "suffix_hml = -hml" in result.output


def test_invalid_config_file(base_args, tmp_path):
    """Test an invalid configuration value is reported."""
    (tmp_path / "chr.toml").write_text('prefix = ""\n')

    result = runner.invoke(app, base_args + ["config"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_start(base_args, card_repo):
    """Test starting a new card branch."""
    result = runner.invoke(app, base_args + ["start", "456"])

    assert result.exit_code == 0, result.output
    assert "Switched to new branch ZUP-456-prd" in result.output
    assert card_repo.repo.active_branch.name == "ZUP-456-prd"


def test_start_prompts_for_card(base_args, card_repo):
    """Test the card number is asked for when missing."""
    result = runner.invoke(app, base_args + ["start"], input="789\n")

    assert result.exit_code == 0, result.output
    assert card_repo.repo.active_branch.name == "ZUP-789-prd"


def test_start_rejects_non_numeric_card(base_args):
    """Test card numbers must be numeric."""
    result = runner.invoke(app, base_args + ["start", "abc"])

    assert result.exit_code == 2
