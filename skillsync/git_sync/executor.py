"""Execution of the single action implied by a classification."""

import logging

from ..errors import GitOperationError
from .decision import UPSTREAM_REF
from .driver import RepositoryDriver
from .models import SyncAction, SyncClassification, SyncOutcome, SyncSignal


def execute_classification(
    classification: SyncClassification,
    driver: RepositoryDriver,
    outcome: SyncOutcome
) -> SyncOutcome:
    """
    Carry out the action for an existing working copy.

    FAST_FORWARDABLE advances the branch with a fast-forward-only merge and
    signals UPDATED; a failed merge is logged but the run still succeeds.
    DIVERGED signals BEHIND without touching the working copy. Every other
    classification is a no-op. NOT_INITIALIZED is handled by bootstrap.
    """
    logger = logging.getLogger('skillsync.git_sync.executor')
    outcome.classification = classification

    if classification == SyncClassification.FAST_FORWARDABLE:
        outcome.action = SyncAction.FAST_FORWARD
        outcome.log("Updating skills to latest version...")
        try:
            driver.fast_forward_merge(UPSTREAM_REF)
        except GitOperationError as e:
            logger.warning(f"Fast-forward failed, keeping current skills: {e}")
            outcome.log("Failed to update skills")
            outcome.error_code = e.error_code
            return outcome

        outcome.log("✓ Skills updated successfully")
        outcome.signal(SyncSignal.UPDATED)

    elif classification == SyncClassification.DIVERGED:
        outcome.action = SyncAction.NOTIFY_BEHIND
        logger.info("Local skills have diverged from upstream; leaving working copy untouched")
        outcome.signal(SyncSignal.BEHIND)

    elif classification == SyncClassification.NOT_INITIALIZED:
        raise ValueError("NOT_INITIALIZED must be handled by bootstrap_repository")

    else:
        outcome.action = SyncAction.NONE
        logger.debug(f"No action for classification {classification.value}")

    return outcome
