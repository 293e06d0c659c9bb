"""Logging utilities for changelog-finder commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "changelog_finder"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the changelog_finder hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(*, verbose: bool = False, debug: bool = False, quiet: bool = False) -> int:
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the changelog_finder logger with console output and optional file sink."""
    level = resolve_level(verbose=verbose, debug=debug, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[changelog-finder] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


def log_stage(logger: logging.Logger, stage: str, details: str | None = None) -> None:
    """Emit a ``[stage]`` debug record for pipeline tracing."""
    message = f"[stage] {stage}"
    if details:
        message = f"{message} {details}"
    logger.debug(message)


__all__ = ["configure_logging", "get_logger", "log_stage", "resolve_level"]
