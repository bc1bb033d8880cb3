"""Configuration management for skillsync."""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Mapping

from dotenv import load_dotenv

from .platform import PlatformInfo, normalize_path, resolve_skills_root


SKILLS_REPO = "https://github.com/obra/superpowers-skills.git"

LEGACY_CONTENT_DIR_NAME = "skills"


@dataclass
class Config:
    """Configuration for a single synchronization run, built once at process start."""

    # Storage
    skills_root: Path = field(default_factory=lambda: Path.home() / ".config" / "superpowers" / "skills")

    # Git synchronization
    skills_repo_url: str = SKILLS_REPO
    git_timeout: float = 60.0
    clone_timeout: float = 300.0

    # Concurrency
    lock_timeout: float = 15.0

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.skills_root = normalize_path(self.skills_root)

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        self.log_level = self.log_level.upper()
        if self.log_level not in valid_log_levels:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {valid_log_levels}")

        if not self.skills_repo_url:
            raise ValueError("skills_repo_url must not be empty")

        if self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive")

        if self.clone_timeout <= 0:
            raise ValueError("clone_timeout must be positive")

        if self.lock_timeout < 0:
            raise ValueError("lock_timeout must be non-negative")

    @property
    def git_dir(self) -> Path:
        """Version-control metadata directory of the working copy."""
        return self.skills_root / ".git"

    @property
    def skills_dir(self) -> Path:
        """Directory holding the individual skills inside the working copy."""
        return self.skills_root / "skills"

    @property
    def superpowers_dir(self) -> Path:
        """Parent directory of the working copy."""
        return self.skills_root.parent

    @property
    def legacy_git_dir(self) -> Path:
        """Metadata directory of the old single-repository layout."""
        return self.superpowers_dir / ".git"

    @property
    def legacy_skills_dir(self) -> Path:
        """Content directory of the old single-repository layout."""
        return self.superpowers_dir / LEGACY_CONTENT_DIR_NAME

    @property
    def lock_file(self) -> Path:
        """Lock file guarding concurrent synchronization runs."""
        return self.superpowers_dir / f".{self.skills_root.name}.sync.lock"


def load_configuration(
    environ: Optional[Mapping[str, str]] = None,
    platform_info: Optional[PlatformInfo] = None,
    use_dotenv: bool = True
) -> Config:
    """
    Load configuration from environment variables with platform-specific defaults.

    Args:
        environ: Environment mapping (defaults to os.environ after loading .env)
        platform_info: Platform used to pick the default skills root
        use_dotenv: Whether to load a .env file into the process environment first

    Returns:
        Validated Config instance
    """
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    try:
        config = Config(
            skills_root=resolve_skills_root(environ, platform_info),
            skills_repo_url=environ.get("SKILLSYNC_REPO_URL") or SKILLS_REPO,
            git_timeout=float(environ.get("SKILLSYNC_GIT_TIMEOUT", "60")),
            clone_timeout=float(environ.get("SKILLSYNC_CLONE_TIMEOUT", "300")),
            lock_timeout=float(environ.get("SKILLSYNC_LOCK_TIMEOUT", "15")),
            log_level=environ.get("SKILLSYNC_LOG_LEVEL", "WARNING")
        )
    except (ValueError, TypeError) as e:
        raise ValueError(f"Configuration error: {e}")

    logging.getLogger('skillsync.config').debug(f"Skills root resolved to {config.skills_root}")
    return config
