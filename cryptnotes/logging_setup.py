"""Logging configuration for the cryptnotes CLI."""

import logging
import sys

APP_NAME = "cryptnotes"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the package logger.

    Diagnostics go to stderr so they never mix with menu output. Note
    contents and the password are never passed to the logger.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    # Prevent duplicate handlers when the CLI is invoked more than once
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(logger.level)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    logger.addHandler(handler)

    logger.debug("Logging initialized")
    return logger
