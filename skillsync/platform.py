"""Cross-platform utilities for skillsync."""

import logging
import os
import platform
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional, Mapping, Union


class PlatformType(Enum):
    """Supported platform types."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


class PlatformInfo:
    """Platform information and utilities."""

    def __init__(self, system: Optional[str] = None):
        """
        Initialize platform detection.

        Args:
            system: Optional system name override (as returned by platform.system())
        """
        self._platform_type = self._detect_platform(system or platform.system())

    def _detect_platform(self, system: str) -> PlatformType:
        """Detect the platform type from a system name."""
        system = system.lower()

        if system == "windows":
            return PlatformType.WINDOWS
        elif system == "darwin":
            return PlatformType.MACOS
        elif system == "linux":
            return PlatformType.LINUX
        else:
            return PlatformType.UNKNOWN

    @property
    def platform_type(self) -> PlatformType:
        """Get the detected platform type."""
        return self._platform_type

    @property
    def is_windows(self) -> bool:
        """Check if running on Windows."""
        return self._platform_type == PlatformType.WINDOWS


# Global platform info instance
_platform_info: Optional[PlatformInfo] = None


def get_platform_info() -> PlatformInfo:
    """Get the global platform info instance."""
    global _platform_info
    if _platform_info is None:
        _platform_info = PlatformInfo()
    return _platform_info


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Normalize a path for the current platform.

    Args:
        path: Path to normalize

    Returns:
        Normalized absolute Path object
    """
    if isinstance(path, str):
        path = Path(path)

    # Expand user home directory (~) first, then make absolute
    return Path(os.path.abspath(path.expanduser()))


def get_default_skills_root(
    environ: Mapping[str, str],
    platform_info: PlatformInfo,
    home: Optional[Path] = None
) -> Path:
    """
    Get the platform-specific default location of the skills working copy.

    - Windows: %LOCALAPPDATA%\\superpowers\\skills
    - macOS/Linux: ~/.config/superpowers/skills

    Args:
        environ: Environment mapping to read LOCALAPPDATA from
        platform_info: Platform to compute the default for
        home: Optional home directory override

    Returns:
        Default skills root path
    """
    home = home or Path.home()

    if platform_info.is_windows:
        local_app_data = environ.get("LOCALAPPDATA") or str(home / "AppData" / "Local")
        return Path(local_app_data) / "superpowers" / "skills"

    return home / ".config" / "superpowers" / "skills"


def resolve_skills_root(
    environ: Mapping[str, str],
    platform_info: Optional[PlatformInfo] = None,
    home: Optional[Path] = None
) -> Path:
    """
    Resolve the skills root directory.

    Precedence:
    1. SUPERPOWERS_SKILLS_ROOT (if set and non-empty)
    2. Platform-specific default

    No side effects; callers are responsible for existence checks.
    """
    override = environ.get("SUPERPOWERS_SKILLS_ROOT")
    if override:
        return normalize_path(override)

    platform_info = platform_info or get_platform_info()
    return normalize_path(get_default_skills_root(environ, platform_info, home))


def is_tool_available(tool: str, timeout: float = 10.0) -> bool:
    """
    Check whether a command-line tool is on the system path.

    Uses `where` on Windows and `which` elsewhere. Absence of the tool, or of
    the lookup command itself, is reported as False rather than an error.

    Args:
        tool: Executable name to look up
        timeout: Maximum time to wait for the lookup command

    Returns:
        True if the tool was found
    """
    logger = logging.getLogger('skillsync.platform')
    lookup = "where" if get_platform_info().is_windows else "which"

    try:
        result = subprocess.run(
            [lookup, tool],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout
        )
        return result.returncode == 0
    except FileNotFoundError:
        logger.debug(f"Lookup command '{lookup}' not available")
        return False
    except subprocess.TimeoutExpired:
        logger.debug(f"Lookup for '{tool}' timed out")
        return False
