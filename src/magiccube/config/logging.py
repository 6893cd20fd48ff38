"""Log routing for magiccube.

Everything goes to stderr; stdout carries only geometry and results. The
console renderer is used by default and ``--log-json`` switches to one JSON
object per line. Matrix text can be arbitrarily long, so matrix-bearing
fields are clipped before rendering. Stdlib records carry fields through
``extra=``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog

PACKAGE_LOGGER = "magiccube"

MATRIX_FIELDS = frozenset({"matrix", "text", "token"})
MAX_FIELD_CHARS = 80


def clip_matrix_fields(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Shorten matrix text fields to ``MAX_FIELD_CHARS`` characters."""
    for key in MATRIX_FIELDS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            hidden = len(value) - MAX_FIELD_CHARS
            event_dict[key] = f"{value[:MAX_FIELD_CHARS]}...(+{hidden} chars)"
    return event_dict


class _StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Writes to whatever ``sys.stderr`` is at emit time.

    Click's test runner and pytest both swap ``sys.stderr`` after logging
    is configured.
    """

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property  # type: ignore[override]
    def stream(self) -> TextIO:
        return sys.stderr

    @stream.setter
    def stream(self, _value: TextIO) -> None:
        pass


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib records through one stderr handler.

    ``verbose`` lowers the ``magiccube`` logger to DEBUG; third-party
    loggers stay at WARNING either way. Safe to call repeatedly.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        clip_matrix_fields,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = _StderrHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *pre_chain],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("pluggy").setLevel(logging.WARNING)
