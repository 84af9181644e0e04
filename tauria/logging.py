"""Logging helpers shared by the extraction pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "tauria"
_CONSOLE_FORMAT = "[tauria] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the ``tauria`` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(level: str | int | None, *, verbose: bool = False) -> int:
    """Translate a configured level name into a ``logging`` level number.

    ``verbose`` wins over the configured level, mirroring a ``--verbose`` flag
    given by whoever drives the extraction.
    """
    if verbose:
        return logging.DEBUG
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    *,
    verbose: bool = False,
    level: str | int | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Install console output (and an optional file sink) on the tauria logger."""
    effective = resolve_level(level, verbose=verbose)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(effective)
    logger.propagate = False

    # Drop previous handlers; generation runs may configure logging repeatedly.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(effective)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(effective)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
