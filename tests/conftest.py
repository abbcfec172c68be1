"""Shared fixtures: throwaway Git repositories with card branches."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import git
import pytest

from gitchr.models import Settings, load_settings

TEST_USER = "Test User"
OTHER_USER = "Other Dev"


def commit_file(
    repo: git.Repo,
    name: str,
    content: str,
    message: str,
    date: str = "2024-01-01",
    author: str = TEST_USER,
) -> str:
    """Write a file and commit it with a fixed author and date; return the short hash."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content)
    repo.index.add([name])
    actor = git.Actor(author, f"{author.lower().replace(' ', '.')}@example.com")
    timestamp = f"{date}T10:00:00"
    commit = repo.index.commit(
        message,
        author=actor,
        committer=actor,
        author_date=timestamp,
        commit_date=timestamp,
    )
    return repo.git.rev_parse("--short", commit.hexsha)


@dataclass
class CardRepo:
    """A repository with a card whose PRD branch is partly picked to HML."""

    path: Path
    repo: git.Repo
    hashes: Dict[str, str]


def init_repo(path: Path) -> git.Repo:
    path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", TEST_USER)
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")
    commit_file(repo, "README.md", "# Card project\n", "Initial commit")
    repo.git.branch("-M", "main")
    return repo


@pytest.fixture
def card_repo(tmp_path) -> CardRepo:
    """Repository with ZUP-123-prd and ZUP-123-hml, checked out on HML.

    PRD history (oldest first):
        login   feat: add login    Test User  2024-01-02  (cherry-picked to HML)
        typo    fix: typo          Test User  2024-01-03  (re-done on HML on 2024-01-05)
        docs    docs: readme       Other Dev  2024-01-03
        export  feat: export       Test User  2024-01-04  (missing on HML)
    """
    repo = init_repo(tmp_path / "repo")
    repo.create_head("ZUP-123-prd")
    repo.create_head("ZUP-123-hml")

    hashes = {}
    repo.git.checkout("ZUP-123-prd")
    hashes["login"] = commit_file(repo, "login.py", "def login(): pass\n", "feat: add login", "2024-01-02")
    hashes["typo"] = commit_file(repo, "typo.txt", "fixed\n", "fix: typo", "2024-01-03")
    hashes["docs"] = commit_file(repo, "docs.md", "docs\n", "docs: readme", "2024-01-03", author=OTHER_USER)
    hashes["export"] = commit_file(repo, "export.py", "def export(): pass\n", "feat: export", "2024-01-04")

    repo.git.checkout("ZUP-123-hml")
    repo.git.cherry_pick(hashes["login"])
    hashes["login_picked"] = repo.git.rev_parse("--short", "HEAD")
    hashes["typo_redone"] = commit_file(repo, "typo.txt", "fixed\n", "fix: typo", "2024-01-05")

    return CardRepo(path=Path(repo.working_tree_dir), repo=repo, hashes=hashes)


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Default settings that ignore the user's configuration file and environment."""
    for key in list(os.environ):
        if key.startswith("CHR_"):
            monkeypatch.delenv(key)
    return load_settings(tmp_path / "chr.toml")


@pytest.fixture
def git_commit():
    """The commit_file helper, for tests that build their own history."""
    return commit_file


@pytest.fixture
def main_repo(tmp_path) -> git.Repo:
    """Repository with a single commit on main."""
    return init_repo(tmp_path / "repo")
