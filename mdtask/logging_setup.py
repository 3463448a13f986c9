"""Logging configuration for the mdtask MCP server."""

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "MDTASK_LOG_LEVEL"


def setup_logging(level: int | str | None = None) -> None:
    """
    Send log records to stderr.

    stdout carries the MCP stdio protocol, so nothing may log there. Call this
    once, before the server starts.

    Args:
        level: Level name or number; defaults to ``$MDTASK_LOG_LEVEL`` or INFO
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    logging.captureWarnings(True)
