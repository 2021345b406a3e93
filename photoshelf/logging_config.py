"""Logging setup."""
import logging

from . import config


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name; defaults to PHOTOSHELF_LOG_LEVEL
    """
    logging.basicConfig(
        level=getattr(logging, level or config.LOG_LEVEL, logging.INFO),
        format=config.LOG_FORMAT,
    )
    # Multipart parsing is chatty at DEBUG
    logging.getLogger("multipart").setLevel(logging.WARNING)
