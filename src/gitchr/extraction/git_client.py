"""Git repository access through GitPython."""

import configparser
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import git
from git import GitCommandError, Repo

from gitchr.errors import GitChrError, GitCommandFailed, ReplayError
from gitchr.extraction.base import VCSClient
from gitchr.models import CommitRecord, ReplayResult, ReplayStatus

logger = logging.getLogger(__name__)

# ASCII unit separator: git expands %x1f; it does not occur in names or subjects
FIELD_SEPARATOR = "\x1f"
LOG_FORMAT = "%h%x1f%an%x1f%s%x1f%ad"
PREFERRED_REMOTE = "origin"
# GitPython runs git with LC_ALL=C, so this text is not localized
EMPTY_PICK_MARKER = "is now empty"


def parse_log_output(output: str, separator: str = FIELD_SEPARATOR) -> List[CommitRecord]:
    """Parse ``git log`` output produced with LOG_FORMAT.

    Lines with fewer than four fields are dropped.

    Args:
        output: Raw stdout of the log command
        separator: Field separator used in the format string

    Returns:
        CommitRecord objects in output order
    """
    commits = []
    for line in output.splitlines():
        if not line.strip():
            continue

        parts = line.split(separator)
        if len(parts) < 4:
            logger.debug(f"Skipping malformed log line: {line!r}")
            continue

        commits.append(
            CommitRecord(hash=parts[0], author=parts[1], message=parts[2], date=parts[3])
        )
    return commits


class GitRepository(VCSClient):
    """VCSClient backed by a local Git repository."""

    def __init__(self, repo_path: Union[str, Path], remote: Optional[str] = None) -> None:
        """Open a repository.

        Args:
            repo_path: Path to the repository (or any directory inside it)
            remote: Remote to fetch from; defaults to origin or the first remote

        Raises:
            GitChrError: If the path is not a Git repository
        """
        self.repo_path = Path(repo_path)
        self._remote = remote
        if not self.repo_path.exists():
            raise GitChrError(f"Repository path does not exist: {self.repo_path}")

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except git.exc.InvalidGitRepositoryError as e:
            raise GitChrError(f"Invalid Git repository: {self.repo_path}") from e

    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            raise GitChrError("HEAD is detached; check out a card branch first") from e

    def current_user_name(self) -> str:
        try:
            return str(self.repo.config_reader().get_value("user", "name"))
        except (configparser.NoSectionError, configparser.NoOptionError) as e:
            raise GitChrError("git user.name is not configured") from e

    def branch_exists(self, name: str) -> bool:
        try:
            self.repo.git.rev_parse("--verify", "--quiet", name)
        except GitCommandError:
            return False
        return True

    def local_branch_exists(self, name: str) -> bool:
        return any(head.name == name for head in self.repo.heads)

    def default_remote(self) -> Optional[str]:
        names = [remote.name for remote in self.repo.remotes]
        if not names:
            return None
        if self._remote:
            return self._remote if self._remote in names else None
        return PREFERRED_REMOTE if PREFERRED_REMOTE in names else names[0]

    def remote_branch_exists(self, remote: str, name: str) -> bool:
        return self.branch_exists(f"refs/remotes/{remote}/{name}")

    def list_commits(
        self, exclude_ref: Optional[str], include_ref: str, limit: int
    ) -> List[CommitRecord]:
        args = []
        if exclude_ref:
            args.append(f"^{exclude_ref}")
        args.append(include_ref)
        if limit > 0:
            args.append(f"--max-count={limit}")
        args.extend([f"--format={LOG_FORMAT}", "--date=short", "--"])

        logger.debug(f"Listing commits: git log {' '.join(args)}")
        try:
            output = self.repo.git.log(*args)
        except GitCommandError as e:
            raise GitCommandFailed(["log", *args], str(e.stderr)) from e

        return parse_log_output(output)

    def is_clean(self) -> bool:
        return not self.repo.is_dirty(untracked_files=True)

    def fetch(self, remote: str) -> None:
        logger.info(f"Fetching {remote}")
        try:
            self.repo.remote(remote).fetch()
        except (GitCommandError, ValueError) as e:
            raise GitCommandFailed(["fetch", remote], str(getattr(e, "stderr", e))) from e

    def replay(self, hashes: Sequence[str]) -> ReplayResult:
        for commit_hash in hashes:
            self._verify_commit(commit_hash)

        applied: List[str] = []
        skipped: List[str] = []
        for index, commit_hash in enumerate(hashes):
            logger.info(f"Cherry-picking {commit_hash}")
            try:
                self.repo.git.cherry_pick(commit_hash)
            except GitCommandError as e:
                conflicted = self.conflicted_files()
                if conflicted:
                    logger.warning(f"Conflict while cherry-picking {commit_hash}: {', '.join(conflicted)}")
                    return ReplayResult(
                        status=ReplayStatus.CONFLICT,
                        applied=applied,
                        skipped=skipped,
                        pending=list(hashes[index + 1:]),
                        conflicting_commit=commit_hash,
                        conflicted_files=conflicted,
                    )

                stderr = str(e.stderr)
                if self.pick_in_progress() and EMPTY_PICK_MARKER in stderr:
                    logger.info(f"Skipping {commit_hash}: its changes are already on the branch")
                    try:
                        self.repo.git.cherry_pick("--skip")
                    except GitCommandError as skip_error:
                        self._abort_pick()
                        raise ReplayError(commit_hash, str(skip_error.stderr), applied=applied) from skip_error
                    skipped.append(commit_hash)
                    continue

                self._abort_pick()
                raise ReplayError(commit_hash, stderr, applied=applied) from e
            applied.append(commit_hash)

        return ReplayResult(status=ReplayStatus.SUCCESS, applied=applied, skipped=skipped)

    def pick_in_progress(self) -> bool:
        """Check whether a cherry-pick is waiting to be continued or aborted."""
        return (Path(self.repo.git_dir) / "CHERRY_PICK_HEAD").exists()

    def conflicted_files(self) -> List[str]:
        """Paths with unresolved merge conflicts."""
        output = self.repo.git.diff("--name-only", "--diff-filter=U")
        return [line for line in output.splitlines() if line.strip()]

    def switch(self, name: str, create: bool = False) -> None:
        args = ["-c", name] if create else [name]
        try:
            self.repo.git.switch(*args)
        except GitCommandError as e:
            raise GitCommandFailed(["switch", *args], str(e.stderr)) from e

    def pull(self) -> None:
        try:
            self.repo.git.pull()
        except GitCommandError as e:
            raise GitCommandFailed(["pull"], str(e.stderr)) from e

    def _abort_pick(self) -> None:
        if not self.pick_in_progress():
            return
        try:
            self.repo.git.cherry_pick("--abort")
        except GitCommandError as e:
            logger.warning(f"Could not abort the interrupted cherry-pick: {e.stderr}")

    def _verify_commit(self, commit_hash: str) -> None:
        try:
            self.repo.commit(commit_hash)
        except (git.exc.BadName, git.exc.BadObject, ValueError) as e:
            raise ReplayError(commit_hash, "commit not found") from e
