"""Application logging.

Adds a SUCCESS level between INFO and WARNING and a prefixing adapter so
components can be handed a logger instead of writing to a fixed stream.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class AppLogger(logging.LoggerAdapter):
    """Logger adapter that tags every message with a component prefix.

    Example:
        log = AppLogger(logging.getLogger("mmt.runner"), prefix="Runner")
        log.success("Quoted pool %s", 7)  # "[Runner] Quoted pool 7"
    """

    def __init__(self, logger: logging.Logger, prefix: str = "App") -> None:
        super().__init__(logger, {"prefix": prefix})
        self.prefix = prefix

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.prefix}] {msg}", kwargs

    def success(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log a completed operation at SUCCESS level."""
        self.log(SUCCESS, msg, *args, **kwargs)


def get_logger(prefix: str, logger: logging.Logger | None = None) -> AppLogger:
    """Create a prefixed logger.

    Args:
        prefix: Component name shown in brackets
        logger: Sink to write to (default: ``mmt.<prefix>``)

    Returns:
        AppLogger wrapping the sink
    """
    sink = logger or logging.getLogger(f"mmt.{prefix.lower()}")
    return AppLogger(sink, prefix=prefix)


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, SUCCESS, WARNING, ERROR)
        log_file: Optional file to write logs to
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.getLevelName(level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
