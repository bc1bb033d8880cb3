#!/usr/bin/env python3
"""Cross-platform tests for skills root resolution and configuration."""

import shutil
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from skillsync.config import Config, SKILLS_REPO, load_configuration
from skillsync.platform import (
    PlatformInfo,
    PlatformType,
    is_tool_available,
    normalize_path,
    resolve_skills_root,
)


class TestPlatformDetection(unittest.TestCase):

    def test_known_systems(self):
        self.assertEqual(PlatformInfo("Windows").platform_type, PlatformType.WINDOWS)
        self.assertEqual(PlatformInfo("Darwin").platform_type, PlatformType.MACOS)
        self.assertEqual(PlatformInfo("Linux").platform_type, PlatformType.LINUX)
        self.assertEqual(PlatformInfo("Plan9").platform_type, PlatformType.UNKNOWN)

    def test_windows_flag(self):
        self.assertTrue(PlatformInfo("Windows").is_windows)
        self.assertFalse(PlatformInfo("Darwin").is_windows)


class TestSkillsRootResolution(unittest.TestCase):
    """Override first, then the per-platform default."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_override_wins(self):
        override = self.temp_dir / "custom" / "skills"
        result = resolve_skills_root({"SUPERPOWERS_SKILLS_ROOT": str(override)}, PlatformInfo("Windows"))
        self.assertEqual(result, normalize_path(override))

    def test_empty_override_is_ignored(self):
        result = resolve_skills_root({"SUPERPOWERS_SKILLS_ROOT": ""}, PlatformInfo("Linux"), home=self.temp_dir)
        self.assertEqual(result, normalize_path(self.temp_dir / ".config" / "superpowers" / "skills"))

    def test_linux_and_macos_default(self):
        for system in ("Linux", "Darwin"):
            with self.subTest(system=system):
                result = resolve_skills_root({}, PlatformInfo(system), home=self.temp_dir)
                self.assertEqual(result, normalize_path(self.temp_dir / ".config" / "superpowers" / "skills"))

    def test_windows_uses_localappdata(self):
        local_app_data = self.temp_dir / "LocalAppData"
        result = resolve_skills_root({"LOCALAPPDATA": str(local_app_data)}, PlatformInfo("Windows"), home=self.temp_dir)
        self.assertEqual(result, normalize_path(local_app_data / "superpowers" / "skills"))

    def test_windows_without_localappdata(self):
        result = resolve_skills_root({}, PlatformInfo("Windows"), home=self.temp_dir)
        self.assertEqual(result, normalize_path(self.temp_dir / "AppData" / "Local" / "superpowers" / "skills"))

    def test_resolution_is_deterministic(self):
        environ = {"SUPERPOWERS_SKILLS_ROOT": str(self.temp_dir / "skills")}
        self.assertEqual(resolve_skills_root(environ), resolve_skills_root(environ))
        self.assertTrue(resolve_skills_root(environ).is_absolute())


class TestConfig(unittest.TestCase):

    def test_defaults_and_derived_paths(self):
        config = Config(skills_root=Path("/tmp/superpowers/skills"))

        self.assertEqual(config.skills_repo_url, SKILLS_REPO)
        self.assertEqual(config.git_dir, config.skills_root / ".git")
        self.assertEqual(config.skills_dir, config.skills_root / "skills")
        self.assertEqual(config.legacy_git_dir, config.skills_root.parent / ".git")
        self.assertEqual(config.legacy_skills_dir, config.skills_root.parent / "skills")
        self.assertEqual(config.lock_file.parent, config.skills_root.parent)

    def test_string_path_is_normalized(self):
        config = Config(skills_root="~/skills")
        self.assertIsInstance(config.skills_root, Path)
        self.assertTrue(config.skills_root.is_absolute())

    def test_validation(self):
        with self.assertRaises(ValueError):
            Config(log_level="LOUD")
        with self.assertRaises(ValueError):
            Config(git_timeout=0)
        with self.assertRaises(ValueError):
            Config(clone_timeout=-1)
        with self.assertRaises(ValueError):
            Config(lock_timeout=-1)
        with self.assertRaises(ValueError):
            Config(skills_repo_url="")

    def test_load_configuration_from_mapping(self):
        environ = {
            "SUPERPOWERS_SKILLS_ROOT": "/srv/skills",
            "SKILLSYNC_REPO_URL": "https://example.com/fork.git",
            "SKILLSYNC_GIT_TIMEOUT": "5",
            "SKILLSYNC_CLONE_TIMEOUT": "50",
            "SKILLSYNC_LOCK_TIMEOUT": "2",
            "SKILLSYNC_LOG_LEVEL": "debug",
        }
        config = load_configuration(environ)

        self.assertEqual(config.skills_root, normalize_path("/srv/skills"))
        self.assertEqual(config.skills_repo_url, "https://example.com/fork.git")
        self.assertEqual(config.git_timeout, 5.0)
        self.assertEqual(config.clone_timeout, 50.0)
        self.assertEqual(config.lock_timeout, 2.0)
        self.assertEqual(config.log_level, "DEBUG")

    def test_load_configuration_rejects_bad_numbers(self):
        with self.assertRaises(ValueError) as context:
            load_configuration({"SKILLSYNC_GIT_TIMEOUT": "soon"})
        self.assertIn("Configuration error", str(context.exception))


class TestToolProbe(unittest.TestCase):

    def test_missing_tool(self):
        self.assertFalse(is_tool_available("skillsync-no-such-tool-xyz"))

    def test_lookup_command_exit_status(self):
        with patch("skillsync.platform.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            self.assertTrue(is_tool_available("gh"))
            self.assertEqual(mock_run.call_args[0][0][1], "gh")

            mock_run.return_value = MagicMock(returncode=1)
            self.assertFalse(is_tool_available("gh"))

    def test_lookup_timeout_counts_as_missing(self):
        with patch("skillsync.platform.subprocess.run", side_effect=subprocess.TimeoutExpired("which", 10)):
            self.assertFalse(is_tool_available("gh"))


if __name__ == "__main__":
    unittest.main()
