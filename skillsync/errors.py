"""Error types for skillsync."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional


class ErrorCategory(Enum):
    """Categories of errors for structured error handling."""
    GIT_SYNC = "git_sync"
    SETUP = "setup"
    CONFIGURATION = "configuration"
    FILE_IO = "file_io"
    LOCK = "lock"


class SkillSyncError(Exception):
    """Base class for skillsync errors."""

    category = ErrorCategory.GIT_SYNC
    error_code = "SKILLSYNC_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class GitOperationError(SkillSyncError):
    """A single version-control command failed or timed out."""

    error_code = "GIT_COMMAND_FAILED"

    def __init__(self, operation: str, message: str, error_code: Optional[str] = None):
        super().__init__(f"{operation} failed: {message}", error_code)
        self.operation = operation


class RepositoryAccessError(GitOperationError):
    """The working copy exists but cannot be opened as a repository."""

    error_code = "REPO_ACCESS_ERROR"


class CloneError(GitOperationError):
    """Bootstrap clone failed; without a working copy nothing else can run."""

    category = ErrorCategory.SETUP
    error_code = "CLONE_FAILED"


class LockTimeoutError(SkillSyncError):
    """Another synchronization run holds the lock."""

    category = ErrorCategory.LOCK
    error_code = "LOCK_TIMEOUT"


@dataclass
class ErrorResponse:
    """Standardized error response format for tool callers."""
    error: str
    error_code: str
    message: str
    timestamp: str
    category: str
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error response to dictionary format."""
        result = {
            "error": self.error,
            "error_code": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp,
            "category": self.category
        }
        if self.context:
            result["context"] = self.context
        return result


def create_error_response(error: Exception, context: Dict[str, Any] = None) -> ErrorResponse:
    """Build an ErrorResponse from an exception."""
    if isinstance(error, SkillSyncError):
        error_code = error.error_code
        category = error.category.value
        message = error.message
    elif isinstance(error, ValueError):
        error_code = "CONFIGURATION_ERROR"
        category = ErrorCategory.CONFIGURATION.value
        message = str(error)
    elif isinstance(error, OSError):
        error_code = "FILE_IO_ERROR"
        category = ErrorCategory.FILE_IO.value
        message = f"File system error: {error}"
    else:
        error_code = "GENERAL_ERROR"
        category = ErrorCategory.GIT_SYNC.value
        message = f"Operation failed: {error}"

    return ErrorResponse(
        error="Skills synchronization failed",
        error_code=error_code,
        message=message,
        timestamp=datetime.now().isoformat(),
        category=category,
        context=context
    )
