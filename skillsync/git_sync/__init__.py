"""Git synchronization of the skills working copy."""

from .manager import SkillsSyncManager, synchronize_skills
from .models import (
    CommitRefs,
    RemoteSelection,
    SyncAction,
    SyncClassification,
    SyncOutcome,
    SyncSignal,
)
from .decision import classify
from .driver import RepositoryDriver, GitPythonDriver

__all__ = [
    'SkillsSyncManager',
    'synchronize_skills',
    'CommitRefs',
    'RemoteSelection',
    'SyncAction',
    'SyncClassification',
    'SyncOutcome',
    'SyncSignal',
    'classify',
    'RepositoryDriver',
    'GitPythonDriver'
]
