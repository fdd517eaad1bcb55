"""Logging setup for sankeyctl.

structlog drives both the ``structlog`` loggers in the service layer and
plain stdlib loggers (the loader, third-party libraries) through one
``ProcessorFormatter`` on stderr, so stdout stays reserved for results.

- Human (default): key-value console lines, coloured on a TTY
- JSON (``--log-json``): one JSON object per line
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers held at WARNING even under --verbose.
_LIBRARY_LOGGERS = ("networkx", "pydantic")


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), pad_event=0)


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route sankeyctl logs to stderr.

    Safe to call more than once: the root handler is replaced, not added.

    Args:
        verbose: Emit sankeyctl DEBUG events. Otherwise WARNING and up.
        log_json: Render JSON lines instead of console text.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_json:
        shared.append(structlog.processors.dict_tracebacks)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("sankeyctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
