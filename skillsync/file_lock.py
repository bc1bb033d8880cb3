"""
Cross-platform lock file for skillsync.

Two sessions starting at the same time would otherwise fetch, merge or clone
into the same working copy concurrently. The lock is an exclusively created
file next to the working copy holding the owner's PID.
"""

import os
import subprocess
import time
import logging
from pathlib import Path

from .config import Config
from .errors import LockTimeoutError
from .platform import get_platform_info


class FileLock:
    """Exclusive lock file with stale-lock cleanup."""

    def __init__(self, lock_file_path: Path, timeout: float = 15.0, stale_after: float = 600.0):
        """
        Initialize file lock.

        Args:
            lock_file_path: Path to the lock file
            timeout: Maximum time to wait for lock acquisition (seconds)
            stale_after: Age after which an existing lock is considered abandoned (seconds)
        """
        self.lock_file_path = lock_file_path
        self.timeout = timeout
        self.stale_after = stale_after
        self.logger = logging.getLogger('skillsync.file_lock')
        self.platform_info = get_platform_info()
        self._lock_acquired = False

    def acquire(self) -> bool:
        """
        Acquire the file lock.

        Returns:
            True if lock was acquired, False if timeout occurred
        """
        start_time = time.monotonic()

        while True:
            self.lock_file_path.parent.mkdir(parents=True, exist_ok=True)

            if self._try_create():
                self._lock_acquired = True
                self.logger.debug(f"Acquired lock: {self.lock_file_path}")
                return True

            if time.monotonic() - start_time >= self.timeout:
                break

            time.sleep(0.1)

        self.logger.warning(f"Failed to acquire lock {self.lock_file_path} within {self.timeout}s")
        return False

    def _try_create(self, cleanup_stale: bool = True) -> bool:
        """Atomically create the lock file, cleaning up a stale one first."""
        try:
            fd = os.open(self.lock_file_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            if cleanup_stale and self._check_and_cleanup_stale_lock():
                return self._try_create(cleanup_stale=False)
            return False

        with os.fdopen(fd, 'w') as f:
            f.write(f"locked_by_pid_{os.getpid()}")
        return True

    def _check_and_cleanup_stale_lock(self) -> bool:
        """
        Remove an existing lock if it is too old or its owner is gone.

        Returns:
            True if the lock was removed
        """
        try:
            lock_age = time.time() - self.lock_file_path.stat().st_mtime
        except FileNotFoundError:
            return True

        if lock_age > self.stale_after:
            self.logger.warning(f"Cleaning up stale lock file: {self.lock_file_path}")
            self.lock_file_path.unlink(missing_ok=True)
            return True

        try:
            lock_content = self.lock_file_path.read_text()
            pid = int(lock_content.split("locked_by_pid_")[1].split("_")[0])
        except FileNotFoundError:
            return True
        except (ValueError, IndexError):
            # Partially written by a concurrent creator; treat as held
            return False

        if not self._is_process_running(pid):
            self.logger.warning(f"Cleaning up lock from dead process {pid}: {self.lock_file_path}")
            self.lock_file_path.unlink(missing_ok=True)
            return True

        return False

    def _is_process_running(self, pid: int) -> bool:
        """Check if a process with given PID is still running."""
        if pid == os.getpid():
            return True

        try:
            if self.platform_info.is_windows:
                result = subprocess.run(
                    ["tasklist", "/FI", f"PID eq {pid}"],
                    capture_output=True,
                    text=True,
                    timeout=5
                )
                return str(pid) in result.stdout
            os.kill(pid, 0)
            return True
        except PermissionError:
            # Process exists but belongs to another user
            return True
        except (OSError, subprocess.TimeoutExpired):
            return False

    def release(self) -> None:
        """Release the file lock if held."""
        if not self._lock_acquired:
            return

        self.lock_file_path.unlink(missing_ok=True)
        self._lock_acquired = False
        self.logger.debug(f"Released lock: {self.lock_file_path}")

    def is_locked(self) -> bool:
        """Check if the lock is currently held by this instance."""
        return self._lock_acquired

    def __enter__(self):
        if not self.acquire():
            raise LockTimeoutError(f"Could not acquire lock {self.lock_file_path} within {self.timeout}s")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def create_sync_lock(config: Config) -> FileLock:
    """
    Lock for the configured working copy.

    Used as a context manager it raises LockTimeoutError if another run holds
    the lock past config.lock_timeout.
    """
    return FileLock(
        config.lock_file,
        timeout=config.lock_timeout,
        stale_after=max(600.0, config.clone_timeout * 2)
    )
