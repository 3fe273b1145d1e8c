"""Logging for gimme.

Registry events (``registered``, ``removed``, ``emptied``,
``registration_rejected``) are structlog key/value events routed through the
stdlib ``gimme`` logger. Until the application configures logging they are
discarded; gimme never touches the root logger.

Applications that want to see them either configure stdlib logging as usual
or call ``configure_logging`` / ``configure_from_settings``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "gimme"

_base_logger = logging.getLogger(LOGGER_NAME)
_base_logger.addHandler(logging.NullHandler())

# Handler installed by configure_logging, replaced on reconfiguration
_handler: logging.Handler | None = None


def _processors(json_output: bool, colors: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    colors: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Send gimme's registry events to a stream.

    Only the ``gimme`` logger is touched: one handler is attached (replacing
    any previous one from this function) and propagation to the root logger
    is switched off.

    Args:
        level: Minimum level for gimme events
        json_output: Render events as JSON lines instead of console text
        colors: Colorize console output
        stream: Destination (stderr when omitted)
    """
    global _handler

    if _handler is not None:
        _base_logger.removeHandler(_handler)
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    _base_logger.addHandler(_handler)
    _base_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    _base_logger.propagate = False

    structlog.configure(
        processors=_processors(json_output, colors),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings) -> None:
    """``configure_logging`` driven by RegistrySettings (``GIMME_LOG_*``)."""
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        colors=not settings.log_json,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structlog logger on top of the stdlib logger ``name``.

    ``name`` should live under the ``gimme`` namespace (``__name__`` inside
    the package) so the NullHandler above applies.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
