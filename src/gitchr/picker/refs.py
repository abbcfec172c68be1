"""Resolution of branch names to the references that are actually queried."""

from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict

from gitchr.errors import GitCommandFailed
from gitchr.extraction import VCSClient

logger = structlog.get_logger(__name__)


class RefKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    LITERAL = "literal"


class ResolvedRef(BaseModel):
    """A branch name and the reference chosen for it."""

    model_config = ConfigDict(frozen=True)

    name: str
    ref: str
    kind: RefKind


class RefResolver:
    """Chooses between local and remote-tracking branches.

    Each branch is resolved on its own: a local branch wins; otherwise the
    remote-tracking branch is used (the remote is fetched once, before the
    first lookup); otherwise the name is used as given and any error is left
    to the history query. Without a remote, local names are always used.
    """

    def __init__(self, client: VCSClient) -> None:
        self.client = client
        self._remote: Optional[str] = client.default_remote()
        self._fetched = False

    @property
    def remote(self) -> Optional[str]:
        return self._remote

    def resolve(self, name: str) -> ResolvedRef:
        """Pick the reference to query for branch ``name``."""
        if self.client.local_branch_exists(name):
            resolved = ResolvedRef(name=name, ref=name, kind=RefKind.LOCAL)
        elif self._remote is None:
            resolved = ResolvedRef(name=name, ref=name, kind=RefKind.LITERAL)
        else:
            self._fetch_once()
            if self.client.remote_branch_exists(self._remote, name):
                resolved = ResolvedRef(name=name, ref=f"{self._remote}/{name}", kind=RefKind.REMOTE)
            else:
                resolved = ResolvedRef(name=name, ref=name, kind=RefKind.LITERAL)

        logger.debug("ref_resolved", branch=name, ref=resolved.ref, kind=resolved.kind.value)
        return resolved

    def _fetch_once(self) -> None:
        if self._fetched:
            return
        self._fetched = True
        try:
            self.client.fetch(self._remote)
        except GitCommandFailed as e:
            logger.warning("fetch_failed", remote=self._remote, error=str(e))
