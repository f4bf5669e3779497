import re
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=None) -> int:
    """
    Replace loguru's default handler with a single sink at ``level``.

    Returns the handler id so callers (mostly tests) can remove it again.
    """
    logger.remove()
    handler_id = logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=sink is None,
    )
    logger.info("Logger configured with level: {}", level.upper())
    return handler_id


_URI_CREDENTIALS = re.compile(r"://([^:/@]+):[^@]*@")


def redact_uri(uri: str) -> str:
    """Hide any password embedded in ``uri``."""
    return _URI_CREDENTIALS.sub(r"://\1:***@", uri)


def redact_username(username: Optional[str]) -> str:
    """Keep the first two characters of ``username`` and star the rest."""
    if not username or len(username) <= 2:
        return "***"
    return f"{username[:2]}{'*' * (len(username) - 2)}"
