"""Session-start context assembly from the synchronized skills."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import Config
from .reporter import parse_output


BEHIND_NOTICE = (
    "⚠️ New skills available from upstream. "
    "Ask me to use the pulling-updates-from-skills-repository skill."
)

FIND_SKILLS_TIMEOUT = 30.0


def using_skills_dir(config: Config) -> Path:
    return config.skills_dir / "using-skills"


def read_using_skills(config: Config) -> str:
    """Read the using-skills introduction, or a short placeholder."""
    skill_file = using_skills_dir(config) / "SKILL.md"

    if not skill_file.exists():
        return "using-skills SKILL.md not found"

    try:
        return skill_file.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logging.getLogger('skillsync.session').warning(f"Error reading {skill_file}: {e}")
        return "Error reading using-skills"


def parse_skill_frontmatter(skill_file: Path) -> Optional[Dict[str, Any]]:
    """
    Parse the YAML front matter of a SKILL.md file.

    Returns None if the file cannot be read and an empty dict when there is
    no usable front matter.
    """
    try:
        lines = skill_file.read_text(encoding='utf-8').splitlines()
    except (OSError, UnicodeDecodeError):
        return None

    if not lines or lines[0].strip() != '---':
        return {}

    try:
        end = next(i for i, line in enumerate(lines[1:], start=1) if line.strip() == '---')
    except StopIteration:
        return {}

    try:
        frontmatter = yaml.safe_load("\n".join(lines[1:end])) or {}
    except yaml.YAMLError as e:
        logging.getLogger('skillsync.session').debug(f"Invalid front matter in {skill_file}: {e}")
        return {}

    return frontmatter if isinstance(frontmatter, dict) else {}


def discover_skills(skills_dir: Path) -> List[Dict[str, str]]:
    """List skills by scanning for SKILL.md files below skills_dir."""
    skills = []
    if not skills_dir.is_dir():
        return skills

    for skill_file in sorted(skills_dir.rglob("SKILL.md")):
        frontmatter = parse_skill_frontmatter(skill_file)
        if frontmatter is None:
            continue

        relative = skill_file.parent.relative_to(skills_dir).as_posix()
        skills.append({
            'path': relative,
            'name': str(frontmatter.get('name') or skill_file.parent.name),
            'description': str(frontmatter.get('description') or '')
        })

    return skills


def format_skill_listing(skills: List[Dict[str, str]]) -> str:
    lines = []
    for skill in skills:
        line = f"{skill['path']}"
        if skill['description']:
            line += f" - {skill['description']}"
        lines.append(line)
    return "\n".join(lines)


def run_find_skills(config: Config, timeout: float = FIND_SKILLS_TIMEOUT) -> str:
    """
    Run the repository's find-skills tool and return its output.

    Prefers find-skills.js (through node), then the find-skills executable,
    and falls back to scanning SKILL.md files when neither is shipped.
    """
    logger = logging.getLogger('skillsync.session')
    tool_dir = using_skills_dir(config)

    js_tool = tool_dir / "find-skills.js"
    script_tool = tool_dir / "find-skills"

    if js_tool.exists():
        command = ["node", str(js_tool)]
    elif script_tool.exists():
        command = [str(script_tool)]
    else:
        skills = discover_skills(config.skills_dir)
        return format_skill_listing(skills) if skills else "find-skills not found"

    env = dict(os.environ)
    env["SUPERPOWERS_SKILLS_ROOT"] = str(config.skills_root)

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Error running find-skills: {e}")
        return "Error running find-skills"

    return result.stdout or "Error running find-skills"


def build_additional_context(config: Config, init_output: str) -> str:
    """Assemble the context text injected at session start."""
    parsed = parse_output(init_output)
    root = config.skills_root.as_posix()

    init_message = f"{parsed.text}\n\n" if parsed.text else ""
    status_message = f"\n\n{BEHIND_NOTICE}" if parsed.behind else ""

    return (
        "<EXTREMELY_IMPORTANT>\n"
        "You have superpowers.\n\n"
        f"{init_message}"
        "**The content below is from skills/using-skills/SKILL.md - your introduction to using skills:**\n\n"
        f"{read_using_skills(config)}\n\n"
        "**Tool paths (use these when you need to search for or run skills):**\n"
        f"- find-skills: {root}/skills/using-skills/find-skills\n"
        f"- skill-run: {root}/skills/using-skills/skill-run\n\n"
        f"**Skills live in:** {root}/skills/ (you work on your own branch and can edit any skill)\n\n"
        "**Available skills (output of find-skills):**\n\n"
        f"{run_find_skills(config)}{status_message}\n"
        "</EXTREMELY_IMPORTANT>"
    )


def build_session_context(config: Config, init_output: str) -> Dict[str, Any]:
    """Hook payload for the SessionStart event."""
    return {
        "hookSpecificOutput": {
            "hookEventName": "SessionStart",
            "additionalContext": build_additional_context(config, init_output)
        }
    }
