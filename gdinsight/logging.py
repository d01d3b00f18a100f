"""Logger hierarchy and handler setup for gdinsight."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "gdinsight"
CONSOLE_FORMAT = "[gdinsight] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``gdinsight`` or one of its children, e.g. ``gdinsight.orchestrator``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send gdinsight records to stderr and, when ``log_file`` is given, append them there.

    Safe to call repeatedly: handlers installed by an earlier call are closed first.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    _reset_handlers(logger)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
