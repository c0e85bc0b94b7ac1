"""Loguru sink setup."""

import sys

from loguru import logger

from uiregistry.core.config import config


def setup_logging(level: str = None) -> None:
    """Send all log output to stderr so stdout stays free for the MCP stdio transport."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or config.log_level).upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
