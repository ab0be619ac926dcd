"""Logging helpers: sink setup and secret redaction."""

import sys
from typing import Optional
from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

REDACTED = "***"
KEY_PREFIX_LENGTH = 10


def redact_secret(secret: Optional[str], reveal_prefix: bool = False) -> str:
    """
    Render a secret for log output.

    Args:
        secret: The value to hide
        reveal_prefix: Show the first few characters followed by "..." instead of a mask

    Returns:
        A string that is safe to log
    """
    if not secret:
        return "<unset>"
    if reveal_prefix:
        return secret[:KEY_PREFIX_LENGTH] + "..."
    return REDACTED


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default handler with a single stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
