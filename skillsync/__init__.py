"""
skillsync - keeps a local skills repository in step with its upstream.

On every session start the working copy is cloned (first run) or safely
fast-forwarded, and a context payload describing the available skills is
produced for the agent.
"""

__version__ = "1.0.0"
__description__ = "Safe session-start synchronization of a skills repository"

from .config import Config, load_configuration
from .git_sync import SkillsSyncManager, SyncOutcome, synchronize_skills

__all__ = ["Config", "load_configuration", "SkillsSyncManager", "SyncOutcome", "synchronize_skills"]
