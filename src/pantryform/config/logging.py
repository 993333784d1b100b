"""Log routing for pantryform: structlog in front of stdlib ``logging``.

Every record, from ``structlog.get_logger`` or ``logging.getLogger``, goes
through the same processor chain and ends up on stderr, either as
console lines or (``--log-json``) one JSON object per line. stdout is
reserved for command results.

While a response row is being processed, :func:`row_context` binds its
index so each log line names the row it belongs to.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Library loggers pinned to WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore", "openpyxl", "PIL")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all pantryform logging to a single stderr handler.

    ``verbose`` lowers the ``pantryform`` logger to DEBUG; the root logger
    stays at WARNING. Calling this again replaces the previous handler.
    """
    shared = _shared_processors()
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
                _final_renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("pantryform").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def row_context(row_index: int) -> Iterator[None]:
    """Tag every log line emitted inside the block with ``row=row_index``."""
    with structlog.contextvars.bound_contextvars(row=row_index):
        yield
