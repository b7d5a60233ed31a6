"""
Logging setup.

All modules log through the shared loguru logger; this only decides where
records go and at which level.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Route loguru output to stderr at the given level.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...).
        force: Reconfigure even if logging was already set up.
    """
    global _configured
    if _configured and not force:
        return

    logger.remove()
    # Resolve sys.stderr per message so redirected streams are honoured
    logger.add(lambda message: sys.stderr.write(message), level=level.upper(), format=LOG_FORMAT)
    _configured = True
