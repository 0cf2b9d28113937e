"""Stdlib logging setup driven by the ``log_level`` setting."""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers kept at WARNING regardless of the app level
SILENCED_LIBRARIES = ("sqlalchemy.engine", "httpx", "httpcore", "multipart")

_configured = False


def configure_logging(level: str | None = None, force: bool = False) -> None:
    """Install a single stream handler on the root logger."""
    global _configured
    if _configured and not force:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level or settings.log_level.value)

    for name in SILENCED_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
