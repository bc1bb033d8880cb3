#!/usr/bin/env python3
"""Test MCP tool registration and the tool functions."""

import asyncio
import json
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from mcp.server.fastmcp import FastMCP

from skillsync.config import Config
from skillsync.errors import CloneError, LockTimeoutError
from skillsync.git_sync.models import SyncClassification, SyncOutcome, SyncSignal
from skillsync.server import register_tools


class RecordingServer:
    """Collects tool functions the way FastMCP's decorator receives them."""

    def __init__(self):
        self.tools = {}

    def tool(self):
        def decorator(func):
            self.tools[func.__name__] = func
            return func
        return decorator


def create_registered_tools(config: Config):
    server = RecordingServer()
    register_tools(server, config)
    return server.tools


def create_skill(skills_dir: Path, relative: str, description: str) -> None:
    skill_file = skills_dir / relative / "SKILL.md"
    skill_file.parent.mkdir(parents=True, exist_ok=True)
    skill_file.write_text(f"---\nname: {Path(relative).name}\ndescription: {description}\n---\n", encoding='utf-8')


def test_tools_are_registered_with_fastmcp():
    """The real FastMCP server advertises all three tools."""
    print("Testing MCP tool registration")

    with tempfile.TemporaryDirectory() as temp_dir:
        config = Config(skills_root=Path(temp_dir) / "skills")
        server = FastMCP("Skills Sync Test")
        register_tools(server, config)

        tools = asyncio.run(server.list_tools())
        names = {tool.name for tool in tools}

        assert names == {"sync_skills", "list_skills", "session_context"}
        print(f"  ✓ Registered tools: {sorted(names)}")


def test_list_skills_tool():
    temp_dir = Path(tempfile.mkdtemp())
    try:
        config = Config(skills_root=temp_dir / "skills")
        create_skill(config.skills_dir, "testing/tdd", "Red, green, refactor")
        create_skill(config.skills_dir, "using-skills", "Start here")

        skills = create_registered_tools(config)["list_skills"]()

        assert [skill['path'] for skill in skills] == ["testing/tdd", "using-skills"]
        assert skills[0]['description'] == "Red, green, refactor"
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_sync_skills_tool_returns_outcome():
    temp_dir = Path(tempfile.mkdtemp())
    try:
        config = Config(skills_root=temp_dir / "skills")
        outcome = SyncOutcome(success=True, classification=SyncClassification.DIVERGED)
        outcome.signal(SyncSignal.BEHIND)

        with patch("skillsync.server.SkillsSyncManager") as manager_class:
            manager_class.return_value.synchronize.return_value = outcome
            result = create_registered_tools(config)["sync_skills"]()

        assert result["classification"] == "diverged"
        assert result["signals"] == ["behind"]
        manager_class.assert_called_once_with(config)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_sync_skills_tool_reports_errors():
    temp_dir = Path(tempfile.mkdtemp())
    try:
        config = Config(skills_root=temp_dir / "skills")

        with patch("skillsync.server.SkillsSyncManager") as manager_class:
            manager_class.return_value.synchronize.side_effect = CloneError("clone", "network unreachable")
            result = create_registered_tools(config)["sync_skills"]()

        assert result["error"] == "Skills synchronization failed"
        assert result["error_code"] == "CLONE_FAILED"
        assert "network unreachable" in result["message"]
        assert result["context"]["skills_root"] == str(config.skills_root)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_session_context_tool():
    temp_dir = Path(tempfile.mkdtemp())
    try:
        config = Config(skills_root=temp_dir / "skills")
        outcome = SyncOutcome(success=True, classification=SyncClassification.DIVERGED)
        outcome.signal(SyncSignal.BEHIND)

        with patch("skillsync.server.SkillsSyncManager") as manager_class:
            manager_class.return_value.synchronize.return_value = outcome
            context = create_registered_tools(config)["session_context"]()

        assert context.startswith("<EXTREMELY_IMPORTANT>")
        assert "New skills available from upstream" in context
        assert "SKILLS_BEHIND" not in context
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_session_context_tool_reports_errors():
    temp_dir = Path(tempfile.mkdtemp())
    try:
        config = Config(skills_root=temp_dir / "skills")

        with patch("skillsync.server.SkillsSyncManager") as manager_class:
            manager_class.return_value.synchronize.side_effect = LockTimeoutError("lock busy")
            text = create_registered_tools(config)["session_context"]()

        result = json.loads(text)
        assert result["error_code"] == "LOCK_TIMEOUT"
        assert result["message"] == "lock busy"
        assert result["context"]["skills_root"] == str(config.skills_root)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


if __name__ == "__main__":
    import pytest
    sys.exit(pytest.main([__file__, "-v"]))
