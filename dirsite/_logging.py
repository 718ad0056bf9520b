"""structlog setup shared by every dirsite command."""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*_args: object) -> structlog.PrintLogger:
    # Looked up per call so redirected streams are honoured.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(*, verbose: bool = False) -> None:
    """Configure structlog to render events to stderr.

    Parameters
    ----------
    verbose : bool, optional
        Emit DEBUG and INFO events when ``True``; otherwise only warnings and
        errors are shown.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
