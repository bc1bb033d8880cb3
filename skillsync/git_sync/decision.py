"""Classification of the working copy relative to its upstream."""

import logging
from typing import Optional

from ..errors import GitOperationError
from .driver import RepositoryDriver
from .models import CommitRefs, SyncClassification


UPSTREAM_REF = "@{u}"
HEAD_REF = "@"


def classify(local: str, remote: str, base: str) -> SyncClassification:
    """
    Classify a (local, remote, base) triple by equality alone.

    local == remote  -> UNCHANGED
    local == base    -> FAST_FORWARDABLE
    remote == base   -> LOCAL_AHEAD
    otherwise        -> DIVERGED
    """
    if local == remote:
        return SyncClassification.UNCHANGED
    if local == base:
        return SyncClassification.FAST_FORWARDABLE
    if remote == base:
        return SyncClassification.LOCAL_AHEAD
    return SyncClassification.DIVERGED


def compute_commit_refs(driver: RepositoryDriver) -> Optional[CommitRefs]:
    """Resolve local, remote and merge-base commits; None if any cannot be resolved."""
    logger = logging.getLogger('skillsync.git_sync.decision')

    try:
        local = driver.resolve_ref(HEAD_REF)
        remote = driver.resolve_ref(UPSTREAM_REF)
        base = driver.merge_base(HEAD_REF, UPSTREAM_REF)
    except GitOperationError as e:
        logger.info(f"Cannot determine merge base: {e}")
        return None

    if not local or not remote:
        return None

    return CommitRefs(local=local, remote=remote, base=base)


def classify_repository(driver: RepositoryDriver) -> SyncClassification:
    """Classify the working copy, UNTRACKED when refs are unavailable."""
    refs = compute_commit_refs(driver)
    if refs is None:
        return SyncClassification.UNTRACKED

    classification = classify(refs.local, refs.remote, refs.base)
    logging.getLogger('skillsync.git_sync.decision').debug(
        f"local={refs.local[:12]} remote={refs.remote[:12]} base={refs.base[:12]} -> {classification.value}"
    )
    return classification
