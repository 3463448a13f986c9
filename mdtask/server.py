"""FastMCP server initialization for mdtask."""

import logging

from mcp.server.fastmcp import FastMCP

from mdtask.config import load_from_default_location
from mdtask.logging_setup import setup_logging
from mdtask.repository import TaskRepository
from mdtask.service import TaskService

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP("mdtask")

_service: TaskService | None = None


def get_service() -> TaskService:
    """Return the service the tools operate on, building it from config on first use."""
    global _service
    if _service is None:
        config = load_from_default_location()
        repo = TaskRepository(config.search_paths())
        _service = TaskService(repo, config)
        logger.info("Serving tasks from %s", ", ".join(str(p) for p in repo.root_paths))
    return _service


def set_service(service: TaskService | None) -> None:
    """Replace the service used by the tools (None rebuilds it from config)."""
    global _service
    _service = service


def run() -> None:
    """Run the MCP server over stdio."""
    # Registers the tools and resources on ``mcp``.
    import mdtask.tools  # noqa: F401

    setup_logging()
    service = get_service()
    if not service.config.mcp.enabled:
        logger.error("MCP server is disabled in the configuration ([mcp] enabled = false)")
        raise SystemExit(1)
    logger.info("Starting mdtask MCP server")
    mcp.run()


if __name__ == "__main__":
    run()
