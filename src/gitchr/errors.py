"""Exceptions raised by gitchr."""

from typing import List, Optional


class GitChrError(Exception):
    """Base exception for gitchr errors"""
    pass


class GitCommandFailed(GitChrError):
    """Raised when a git command fails"""
    def __init__(self, command: List[str], stderr: str):
        self.command = command
        self.stderr = stderr.strip()
        super().__init__(f"Command git {' '.join(command)} failed: {self.stderr}")


class BranchNameError(GitChrError):
    """Raised when a branch does not follow the card naming convention"""
    pass


class RefResolutionError(GitChrError):
    """Raised when a branch cannot be resolved to any usable reference"""
    def __init__(self, branch: str, ref: str, reason: str = ""):
        self.branch = branch
        self.ref = ref
        message = f"Branch '{branch}' could not be read (tried ref '{ref}')"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ReplayError(GitChrError):
    """Raised when a commit cannot be replayed for a reason other than a conflict"""
    def __init__(self, commit_hash: str, reason: str, applied: Optional[List[str]] = None):
        self.commit_hash = commit_hash
        self.reason = reason.strip()
        self.applied = list(applied or [])
        message = f"Failed to cherry-pick commit {commit_hash}: {self.reason}"
        if self.applied:
            message += f" (already applied: {', '.join(self.applied)})"
        super().__init__(message)


class WorkingTreeDirtyError(GitChrError):
    """Raised when an operation needs a clean working tree"""
    pass
