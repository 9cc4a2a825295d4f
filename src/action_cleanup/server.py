"""
MCP server exposing the read-only scans using FastMCP.
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from mcp.server.fastmcp import FastMCP

from .config import CleanupConfig, load_config
from .routes import RoutesScanner
from .scanner.empty_folders import EmptyFolderFinder
from .scanner.orchestrator import Scanner

logger = logging.getLogger("action_cleanup.mcp")


async def scan_server_actions(project_root: str, config: CleanupConfig) -> dict:
    try:
        result = await Scanner(Path(project_root), config.scan).scan()
        return {"status": "success", **result.to_dict()}
    except Exception as e:
        logger.error(f"Error scanning server actions: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}


async def scan_dead_routes(project_root: str, config: CleanupConfig) -> dict:
    try:
        result = await RoutesScanner(Path(project_root), config.scan).scan()
        if not result.found:
            return {"status": "error", "error": f"{config.scan.routes_file} not found"}
        return {"status": "success", **result.to_dict()}
    except Exception as e:
        logger.error(f"Error scanning routes: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}


async def find_empty_folders(project_root: str, config: CleanupConfig) -> dict:
    try:
        finder = EmptyFolderFinder(Path(project_root), config.scan.action_dirs)
        folders = await finder.find()
        return {"status": "success", "emptyFolders": [f.to_dict() for f in folders]}
    except Exception as e:
        logger.error(f"Error finding empty folders: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}


def create_mcp_server(config: CleanupConfig = None) -> FastMCP:
    """Create and configure the MCP server instance"""
    if config is None:
        config = load_config()

    server = FastMCP(name=config.name, host=config.host, port=config.port)
    register_tools(server, config)
    return server


def register_tools(mcp_server: FastMCP, config: CleanupConfig) -> None:
    """Register all MCP tools with the server."""

    @mcp_server.tool(
        name="scan_server_actions",
        description="Scan a project's app/api and app/lib server actions and report which ones are referenced from views, JSON configuration and scripts. Actions with no references are classified safe-to-delete.",
    )
    async def scan_server_actions_tool(project_root: str) -> dict:
        """
        Scan a project for unreferenced server actions.

        Args:
            project_root (str): Absolute path of the project to scan

        Returns:
            dict: {"status": "success", "summary": {...}, "actions": [...],
                   "emptyFolders": [...], "warnings": [...]} or
                  {"status": "error", "error": str}

        Note:
            Read-only. Dynamic or computed URLs are not detected, so a
            safe-to-delete classification still needs review.
        """
        return await scan_server_actions(project_root, config)

    @mcp_server.tool(
        name="scan_dead_routes",
        description="Check app/config/routes.json for routes whose page, exec or layout file does not exist.",
    )
    async def scan_dead_routes_tool(project_root: str) -> dict:
        return await scan_dead_routes(project_root, config)

    @mcp_server.tool(
        name="find_empty_folders",
        description="List folders under app/api and app/lib that contain no files.",
    )
    async def find_empty_folders_tool(project_root: str) -> dict:
        return await find_empty_folders(project_root, config)


@click.command()
@click.option("--port", default=3001, help="Port to listen on for SSE")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    help="Transport type (stdio or sse)",
)
@click.option("--config", "config_path", default=None, help="Path to a config.yaml")
def main(port: int, transport: str, config_path: str) -> int:
    """Run the server with specified transport."""
    config = load_config(config_path)
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    server = create_mcp_server(config)
    try:
        if transport == "stdio":
            asyncio.run(server.run_stdio_async())
        else:
            server.settings.port = port
            asyncio.run(server.run_sse_async())
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
