"""Selection of the remote to synchronize against."""

import logging
from typing import Sequence

from ..errors import GitOperationError
from .driver import RepositoryDriver
from .models import RemoteSelection


FALLBACK_REMOTES = ("upstream", "origin")


def select_remote(driver: RepositoryDriver, fallbacks: Sequence[str] = FALLBACK_REMOTES) -> RemoteSelection:
    """
    Determine and fetch the remote for this run.

    1. The current branch's tracking remote, if configured. A failed fetch is
       logged and ignored; the refs are merely stale.
    2. Otherwise each fallback remote in order until one fetches. A missing
       remote or failed fetch moves on to the next one.

    Failures never escalate; when nothing could be fetched the selection
    reports that no update signal is available.
    """
    logger = logging.getLogger('skillsync.git_sync.remote_selector')

    tracking_remote = driver.tracking_remote()
    if tracking_remote:
        selection = RemoteSelection(remote=tracking_remote, tracking=True, fetched=False, attempted=[tracking_remote])
        try:
            driver.fetch(tracking_remote)
            selection.fetched = True
        except GitOperationError as e:
            logger.warning(f"Fetch from tracking remote '{tracking_remote}' failed, using existing refs: {e}")
        return selection

    selection = RemoteSelection(remote=None, tracking=False, fetched=False)
    for name in fallbacks:
        if not driver.has_remote(name):
            logger.debug(f"Remote '{name}' not configured")
            continue

        selection.attempted.append(name)
        try:
            driver.fetch(name)
        except GitOperationError as e:
            logger.info(f"Fetch from '{name}' failed: {e}")
            continue

        selection.remote = name
        selection.fetched = True
        return selection

    logger.info("No remote could be fetched; skipping update check")
    return selection
