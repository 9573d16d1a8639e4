"""Logging for the vetclinic CLI.

Everything goes to stderr through one stdlib handler whose formatter is
structlog's, so ``logging.getLogger(__name__)`` records and structlog
events come out alike: a console line by default, a JSON object per line
with ``--log-json``.  Each record carries the data directory of the
session.

``vetclinic`` loggers: DEBUG with ``-v``, ERROR with ``-q``, WARNING
otherwise.  Other libraries stay at WARNING.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _clinic_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _stderr_handler(log_json: bool) -> logging.Handler:
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
    data_dir: Path | None = None,
) -> None:
    """Route all logging to stderr; safe to call once per CLI invocation.

    Args:
        verbose: DEBUG for vetclinic loggers (wins over *quiet*).
        quiet: Only errors from vetclinic loggers.
        log_json: JSON lines instead of console output.
        data_dir: Bound as ``data_dir`` on every record when given.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(log_json))
    root.setLevel(logging.WARNING)
    logging.getLogger("vetclinic").setLevel(_clinic_level(verbose=verbose, quiet=quiet))

    structlog.contextvars.clear_contextvars()
    if data_dir is not None:
        structlog.contextvars.bind_contextvars(data_dir=str(data_dir))
