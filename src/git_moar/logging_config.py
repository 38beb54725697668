"""
Logging for git-moar.

Log records go to stderr through rich so the report tables on stdout stay
clean; ``--log-file`` adds a plain-text copy. Every module logs under the
``git_moar`` namespace.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "git_moar"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    # --quiet wins when both flags are given
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def _console_handler(verbose: bool) -> logging.Handler:
    return RichHandler(
        console=Console(stderr=True),
        markup=False,
        show_path=verbose,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
    )


def _file_handler(path: str) -> logging.Handler:
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route log records to stderr and, optionally, a file.

    Args:
        verbose: Log at DEBUG and show source paths and tracebacks with locals
        quiet: Log errors only
        log_file: Append a plain-text copy of every record to this file

    Returns:
        The ``git_moar`` logger
    """
    level = _level(verbose, quiet)
    handlers = [_console_handler(verbose)]
    if log_file:
        handlers.append(_file_handler(log_file))

    # force=True replaces handlers from an earlier call in the same process
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` under the ``git_moar`` namespace (the root one for None)."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
