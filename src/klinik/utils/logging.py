"""Logging helpers shared by every klinik module."""

import logging
import os
import sys

ROOT_LOGGER_NAME = "klinik"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | int | None = None) -> None:
    """
    Install a single stream handler on the package root logger.

    Level resolution order: explicit argument, KLINIK_LOG_LEVEL env var, INFO.
    Calling this again only updates the level.
    """
    global _configured

    resolved = level or os.environ.get("KLINIK_LOG_LEVEL") or "INFO"
    if isinstance(resolved, str):
        resolved = resolved.upper()

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(resolved)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(handler)
        _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the klinik namespace (handlers are set up by configure_logging)."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
