"""Skills synchronization manager: the session-start state machine."""

import logging
from typing import Callable, Optional

from ..config import Config
from ..errors import GitOperationError, LockTimeoutError
from ..file_lock import create_sync_lock
from ..platform import is_tool_available
from .bootstrap import bootstrap_repository
from .decision import classify_repository
from .driver import GitPythonDriver, RepositoryDriver
from .executor import execute_classification
from .models import SyncAction, SyncOutcome
from .remote_selector import select_remote


class SkillsSyncManager:
    """
    Keeps the local skills working copy in step with its upstream.

    One call to synchronize() performs, in order: lock, remote selection and
    fetch, ref resolution and classification, at most one mutating action.
    Only a failed bootstrap clone produces a non-zero exit code; every other
    failure skips the update and is retried naturally on the next session.
    """

    def __init__(
        self,
        config: Config,
        driver: Optional[RepositoryDriver] = None,
        tool_probe: Callable[[str], bool] = is_tool_available
    ):
        """
        Initialize the manager.

        Args:
            config: Run configuration
            driver: Repository driver (defaults to GitPython on config.skills_root)
            tool_probe: Callable reporting whether a CLI tool is installed
        """
        self.config = config
        self.driver = driver or GitPythonDriver(
            config.skills_root,
            timeout=config.git_timeout,
            clone_timeout=config.clone_timeout
        )
        self.tool_probe = tool_probe
        self.logger = logging.getLogger('skillsync.git_sync')

    def is_initialized(self) -> bool:
        """Whether the working copy already has version-control metadata."""
        return self.config.git_dir.exists()

    def synchronize(self) -> SyncOutcome:
        """Run one synchronization attempt under the sync lock."""
        try:
            with create_sync_lock(self.config):
                return self._synchronize_unlocked()
        except LockTimeoutError as e:
            self.logger.warning(str(e), extra={'operation': 'synchronize'})
            outcome = self._new_outcome()
            outcome.action = SyncAction.SKIPPED
            outcome.error_code = e.error_code
            outcome.log("Skills are being updated by another session; skipping update")
            return outcome

    def _new_outcome(self) -> SyncOutcome:
        return SyncOutcome(success=True, classification=None, skills_root=self.config.skills_root)

    def _synchronize_unlocked(self) -> SyncOutcome:
        outcome = self._new_outcome()

        if not self.is_initialized():
            self.logger.info(f"No repository at {self.config.skills_root}, bootstrapping", extra={'operation': 'bootstrap'})
            return bootstrap_repository(self.config, self.driver, outcome, self.tool_probe)

        try:
            selection = select_remote(self.driver)
            outcome.remote_used = selection.remote

            if not selection.update_signal_available:
                outcome.action = SyncAction.SKIPPED
                return outcome

            classification = classify_repository(self.driver)
            self.logger.info(f"Repository classified as {classification.value}", extra={'operation': 'classify'})
            return execute_classification(classification, self.driver, outcome)

        except GitOperationError as e:
            self.logger.warning(f"Skipping skills update: {e}", extra={'operation': 'synchronize'})
            outcome.action = SyncAction.SKIPPED
            outcome.error_code = e.error_code
            return outcome


def synchronize_skills(config: Config) -> SyncOutcome:
    """Convenience function running one synchronization with the default driver."""
    return SkillsSyncManager(config).synchronize()
