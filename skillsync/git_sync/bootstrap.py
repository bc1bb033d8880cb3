"""First-run bootstrap: legacy migration, clone and remote registration."""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..config import Config
from ..errors import GitOperationError
from ..platform import is_tool_available
from .driver import RepositoryDriver
from .models import SyncAction, SyncClassification, SyncOutcome


UPSTREAM_REMOTE = "upstream"


def backup_path_for(path: Path) -> Path:
    """First unused `<name>.bak`, `<name>.bak.1`, ... sibling of path."""
    candidate = path.with_name(f"{path.name}.bak")
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.bak.{counter}")
        counter += 1
    return candidate


def migrate_legacy_installation(config: Config, outcome: SyncOutcome) -> bool:
    """
    Move an old single-repository installation aside.

    The old layout kept `.git` one level above the skills root, usually next
    to a `skills` content directory. The `.git` is renamed with a `.bak`
    suffix and the content directory likewise when present; nothing is
    deleted.

    Returns:
        True if a legacy installation was moved aside
    """
    logger = logging.getLogger('skillsync.git_sync.bootstrap')

    legacy_git_dir = config.legacy_git_dir
    legacy_skills_dir = config.legacy_skills_dir

    if not legacy_git_dir.exists():
        return False

    outcome.log("Found existing installation. Backing up...")

    git_backup = backup_path_for(legacy_git_dir)
    legacy_git_dir.rename(git_backup)
    logger.info(f"Moved {legacy_git_dir} to {git_backup}")

    if legacy_skills_dir.exists():
        skills_backup = backup_path_for(legacy_skills_dir)
        legacy_skills_dir.rename(skills_backup)
        logger.info(f"Moved {legacy_skills_dir} to {skills_backup}")
        outcome.log(f"Your old skills are in {skills_backup}")

    return True


def bootstrap_repository(
    config: Config,
    driver: RepositoryDriver,
    outcome: Optional[SyncOutcome] = None,
    tool_probe: Callable[[str], bool] = is_tool_available
) -> SyncOutcome:
    """
    Create the working copy for the first time.

    1. Ensures the parent directory exists
    2. Moves a legacy installation aside
    3. Clones the canonical skills repository (the only fatal step)
    4. Registers the canonical source as remote 'upstream' (best effort)
    5. Probes for the GitHub CLI to decide on a fork suggestion

    Args:
        config: Run configuration
        driver: Repository driver bound to config.skills_root
        outcome: Outcome to append to (a new one is created if omitted)
        tool_probe: Callable reporting whether a CLI tool is installed

    Returns:
        SyncOutcome with exit_code 1 if the clone failed
    """
    logger = logging.getLogger('skillsync.git_sync.bootstrap')
    if outcome is None:
        outcome = SyncOutcome(success=True, classification=SyncClassification.NOT_INITIALIZED)
    outcome.classification = SyncClassification.NOT_INITIALIZED
    outcome.action = SyncAction.CLONE
    outcome.skills_root = config.skills_root

    outcome.log("Initializing skills repository...")

    try:
        config.superpowers_dir.mkdir(parents=True, exist_ok=True)
        migrate_legacy_installation(config, outcome)
    except OSError as e:
        logger.error(f"Failed to prepare {config.superpowers_dir}: {e}")
        return _fail(outcome, f"Failed to prepare skills directory: {e}", "SETUP_FAILED")

    try:
        driver.clone(config.skills_repo_url, config.skills_root)
    except GitOperationError as e:
        logger.error(f"Clone of {config.skills_repo_url} failed: {e}")
        return _fail(outcome, f"Failed to clone skills repository: {e.message}", e.error_code)

    if not config.git_dir.exists():
        return _fail(outcome, f"Failed to clone skills repository: no repository at {config.skills_root}", "CLONE_INCOMPLETE")

    if tool_probe("gh"):
        outcome.log("")
        outcome.log("GitHub CLI detected. Would you like to fork superpowers-skills?")
        outcome.log("Forking allows you to share skill improvements with the community.")
        outcome.log("")

    try:
        driver.add_remote(UPSTREAM_REMOTE, config.skills_repo_url)
    except GitOperationError as e:
        logger.warning(f"Could not register '{UPSTREAM_REMOTE}' remote: {e}")

    outcome.log(f"Skills repository initialized at {config.skills_root}")
    return outcome


def _fail(outcome: SyncOutcome, message: str, error_code: str) -> SyncOutcome:
    outcome.log(message)
    outcome.success = False
    outcome.exit_code = 1
    outcome.error_code = error_code
    return outcome
