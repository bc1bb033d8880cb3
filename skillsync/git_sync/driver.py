"""Repository driver: the narrow interface between sync logic and git."""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from git import Git, Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import GitOperationError, RepositoryAccessError, CloneError


class RepositoryDriver(ABC):
    """
    Version-control operations needed by the synchronization state machine.

    Every mutating or network operation raises GitOperationError (or a
    subclass) on failure so callers can decide whether the failure is fatal.
    """

    @abstractmethod
    def tracking_remote(self) -> Optional[str]:
        """Remote implied by the current branch's upstream, or None."""

    @abstractmethod
    def has_remote(self, name: str) -> bool:
        """Whether a remote with this name is configured."""

    @abstractmethod
    def fetch(self, remote: str) -> None:
        """Fetch from a remote."""

    @abstractmethod
    def resolve_ref(self, ref: str) -> str:
        """Resolve a revision expression to a commit identifier."""

    @abstractmethod
    def merge_base(self, first: str, second: str) -> str:
        """Common ancestor of two revisions."""

    @abstractmethod
    def fast_forward_merge(self, ref: str) -> None:
        """Advance the current branch to ref; refuse anything but a fast-forward."""

    @abstractmethod
    def clone(self, url: str, dest: Path) -> None:
        """Clone url into dest."""

    @abstractmethod
    def add_remote(self, name: str, url: str) -> bool:
        """Register a remote; returns False if it already existed."""


class GitPythonDriver(RepositoryDriver):
    """RepositoryDriver backed by GitPython and the git executable."""

    def __init__(self, repo_dir: Path, timeout: float = 60.0, clone_timeout: float = 300.0):
        """
        Initialize the driver.

        Args:
            repo_dir: Working copy directory
            timeout: Seconds before a fetch or merge is killed
            clone_timeout: Seconds before a clone is killed
        """
        self.repo_dir = repo_dir
        self.timeout = timeout
        self.clone_timeout = clone_timeout
        self.logger = logging.getLogger('skillsync.git_sync.driver')
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Lazily opened repository."""
        if self._repo is None:
            try:
                repo = Repo(self.repo_dir)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise RepositoryAccessError("open_repository", f"{self.repo_dir}: {e}")
            # Never block a session start on a credential prompt
            repo.git.update_environment(GIT_TERMINAL_PROMPT="0")
            self._repo = repo
        return self._repo

    def tracking_remote(self) -> Optional[str]:
        try:
            tracking_ref = self.repo.git.rev_parse("--abbrev-ref", "--symbolic-full-name", "@{u}")
        except GitCommandError as e:
            self.logger.debug(f"No upstream tracking configured: {e.stderr.strip() if e.stderr else e}")
            return None

        remote = tracking_ref.strip().split("/")[0]
        return remote or None

    def has_remote(self, name: str) -> bool:
        return name in [remote.name for remote in self.repo.remotes]

    def fetch(self, remote: str) -> None:
        self.logger.debug(f"Fetching from {remote}")
        try:
            self.repo.git.fetch(remote, **_timeout_kwargs(self.timeout))
        except GitCommandError as e:
            raise GitOperationError("fetch", _describe(e), "FETCH_FAILED")

    def resolve_ref(self, ref: str) -> str:
        try:
            return self.repo.git.rev_parse(ref).strip()
        except GitCommandError as e:
            raise GitOperationError("rev-parse", _describe(e), "REF_RESOLUTION_FAILED")

    def merge_base(self, first: str, second: str) -> str:
        try:
            return self.repo.git.merge_base(first, second).strip()
        except GitCommandError as e:
            raise GitOperationError("merge-base", _describe(e), "REF_RESOLUTION_FAILED")

    def fast_forward_merge(self, ref: str) -> None:
        self.logger.debug(f"Fast-forwarding to {ref}")
        try:
            self.repo.git.merge("--ff-only", ref, **_timeout_kwargs(self.timeout))
        except GitCommandError as e:
            raise GitOperationError("merge --ff-only", _describe(e), "FF_MERGE_FAILED")

    def clone(self, url: str, dest: Path) -> None:
        self.logger.info(f"Cloning {url} into {dest}")
        git_cmd = Git(str(dest.parent))
        git_cmd.update_environment(GIT_TERMINAL_PROMPT="0")
        try:
            git_cmd.clone(url, str(dest), **_timeout_kwargs(self.clone_timeout))
        except GitCommandError as e:
            raise CloneError("clone", _describe(e))
        self._repo = None

    def add_remote(self, name: str, url: str) -> bool:
        if self.has_remote(name):
            self.logger.debug(f"Remote '{name}' already configured")
            return False
        try:
            self.repo.create_remote(name, url)
        except GitCommandError as e:
            raise GitOperationError("remote add", _describe(e), "REMOTE_ADD_FAILED")
        return True


def _describe(error: GitCommandError) -> str:
    """Short description of a failed git command."""
    stderr = error.stderr.strip() if isinstance(error.stderr, str) else ""
    return stderr or str(error)


def _timeout_kwargs(timeout: float) -> Dict[str, Any]:
    """
    Execute options bounding a git command's runtime.

    GitPython refuses kill_after_timeout on Windows, so commands there run
    unbounded.
    """
    if sys.platform == "win32":
        return {}
    return {"kill_after_timeout": timeout}
