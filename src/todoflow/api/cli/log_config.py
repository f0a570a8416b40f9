"""Structlog setup for CLI commands."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """
    WARNING level by default, DEBUG with --debug.

    Events are handed to stdlib logging, whose stderr handler keeps
    command output on stdout machine-readable.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
