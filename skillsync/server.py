"""MCP server exposing skills synchronization over stdio."""

import json
import logging
import sys
from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from .config import Config, load_configuration
from .errors import create_error_response
from .git_sync import SkillsSyncManager
from .logging_config import setup_logging
from .reporter import format_outcome
from .session_context import build_additional_context, discover_skills


def register_tools(server: FastMCP, server_config: Config) -> None:
    """Register MCP tools with the server instance."""

    @server.tool()
    def sync_skills() -> Dict[str, Any]:
        """
        Bring the local skills repository up to date with upstream.

        Clones the repository on first use; afterwards only fast-forward
        updates are applied. If local and upstream history have diverged the
        result carries the "behind" signal and nothing is changed.

        Returns:
            Dictionary with classification, action taken, log messages and signals
        """
        try:
            return SkillsSyncManager(server_config).synchronize().to_dict()
        except Exception as e:
            logging.getLogger('skillsync.server').error(f"sync_skills failed: {e}", exc_info=True)
            return create_error_response(e, {'skills_root': str(server_config.skills_root)}).to_dict()

    @server.tool()
    def list_skills() -> List[Dict[str, str]]:
        """
        List the skills available in the local skills repository.

        Returns:
            List of skills with their path, name and description
        """
        return discover_skills(server_config.skills_dir)

    @server.tool()
    def session_context() -> str:
        """
        Synchronize the skills and return the session introduction text.

        Returns:
            The using-skills introduction, tool paths and available skills
        """
        try:
            outcome = SkillsSyncManager(server_config).synchronize()
            return build_additional_context(server_config, format_outcome(outcome))
        except Exception as e:
            logging.getLogger('skillsync.server').error(f"session_context failed: {e}", exc_info=True)
            response = create_error_response(e, {'skills_root': str(server_config.skills_root)})
            return json.dumps(response.to_dict(), indent=2)

    logging.getLogger('skillsync.init').info("MCP tools registered successfully")


def initialize_server() -> FastMCP:
    """Initialize MCP server with stdio transport."""
    server_config = load_configuration()
    setup_logging(server_config)
    init_logger = logging.getLogger('skillsync.init')
    init_logger.info(f"Skills root: {server_config.skills_root}")

    server = FastMCP("Skills Sync", log_level=server_config.log_level)
    register_tools(server, server_config)
    return server


def main():
    """Main entry point for the skillsync MCP server."""
    try:
        server = initialize_server()
        server.run(transport="stdio")
    except KeyboardInterrupt:
        logging.getLogger('skillsync.init').info("Server stopped by user (Ctrl+C)")
    except ValueError as e:
        print(f"CRITICAL: Server failed to start: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
