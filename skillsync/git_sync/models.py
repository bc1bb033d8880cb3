"""Data structures describing repository state and synchronization results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class SyncClassification(Enum):
    """Relative state of the working copy and its upstream."""
    UNCHANGED = "unchanged"                 # local == remote
    FAST_FORWARDABLE = "fast_forwardable"   # local is a strict ancestor of remote
    LOCAL_AHEAD = "local_ahead"             # remote is an ancestor of local
    DIVERGED = "diverged"                   # histories have split
    UNTRACKED = "untracked"                 # refs could not be resolved
    NOT_INITIALIZED = "not_initialized"     # no working copy yet


class SyncSignal(Enum):
    """Machine-parseable signals reported to the session-start caller."""
    UPDATED = "updated"
    BEHIND = "behind"


class SyncAction(Enum):
    """The single action taken by one synchronization run."""
    NONE = "none"
    FAST_FORWARD = "fast_forward"
    NOTIFY_BEHIND = "notify_behind"
    CLONE = "clone"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CommitRefs:
    """Commit identities computed for one run; never cached."""
    local: str
    remote: str
    base: str


@dataclass
class RemoteSelection:
    """Result of choosing the remote to synchronize against."""
    remote: Optional[str]
    tracking: bool
    fetched: bool
    attempted: List[str] = field(default_factory=list)

    @property
    def update_signal_available(self) -> bool:
        """Whether classification is worth running this time."""
        return self.tracking or self.fetched


@dataclass
class SyncOutcome:
    """Result of a synchronization run."""
    success: bool
    classification: Optional[SyncClassification]
    action: SyncAction = SyncAction.NONE
    messages: List[str] = field(default_factory=list)
    signals: List[SyncSignal] = field(default_factory=list)
    exit_code: int = 0
    remote_used: Optional[str] = None
    error_code: Optional[str] = None
    skills_root: Optional[Path] = None

    def log(self, message: str) -> None:
        """Append a human-readable log line."""
        self.messages.append(message)

    def signal(self, signal: SyncSignal) -> None:
        """Record a signal, at most once per run."""
        if signal not in self.signals:
            self.signals.append(signal)

    @property
    def updated(self) -> bool:
        return SyncSignal.UPDATED in self.signals

    @property
    def behind(self) -> bool:
        return SyncSignal.BEHIND in self.signals

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary format."""
        return {
            "success": self.success,
            "classification": self.classification.value if self.classification else None,
            "action": self.action.value,
            "messages": list(self.messages),
            "signals": [s.value for s in self.signals],
            "exit_code": self.exit_code,
            "remote_used": self.remote_used,
            "error_code": self.error_code,
            "skills_root": str(self.skills_root) if self.skills_root else None
        }
