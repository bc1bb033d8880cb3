"""Session-start hook entry points."""

import json
import logging
import sys

from .config import Config, load_configuration
from .git_sync import SkillsSyncManager, SyncOutcome
from .logging_config import setup_logging
from .reporter import format_outcome
from .session_context import build_session_context


def run_initialize(config: Config) -> SyncOutcome:
    """Synchronize the skills working copy once."""
    return SkillsSyncManager(config).synchronize()


def initialize_main() -> None:
    """
    Bootstrap or update the skills repository.

    Prints the human-readable log with signal tokens to stdout and exits
    non-zero only when the first-run clone failed.
    """
    try:
        config = load_configuration()
        setup_logging(config)
        outcome = run_initialize(config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = format_outcome(outcome)
    if output:
        print(output)
    sys.exit(outcome.exit_code)


def session_start_main() -> None:
    """
    SessionStart hook: synchronize, then print the context payload as JSON.

    A failed synchronization still produces a payload; its log text explains
    what happened.
    """
    try:
        config = load_configuration()
        setup_logging(config)
    except ValueError as e:
        print(f"Error in session-start: {e}", file=sys.stderr)
        sys.exit(1)

    logger = logging.getLogger('skillsync.hook')
    try:
        init_output = format_outcome(run_initialize(config))
    except Exception as e:
        logger.error(f"Skills initialization failed: {e}", exc_info=True)
        init_output = str(e)

    try:
        payload = build_session_context(config, init_output)
    except Exception as e:
        print(f"Error in session-start: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    sys.exit(0)
