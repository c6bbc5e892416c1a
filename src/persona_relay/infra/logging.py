"""Root logger setup shared by the relay and uvicorn.

Two output styles, picked by ``LoggingConfig.json_output``: JSON lines
for log collectors, or uvicorn's coloured formatter for a terminal.
Every record carries ``trace_id`` / ``span_id`` (empty outside a span).
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from persona_relay.configs.system import LoggingConfig

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_NOISY_LOGGERS = ("httpx", "httpcore", "opentelemetry")


class _TraceContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        valid = ctx.is_valid
        record.trace_id = format(ctx.trace_id, "032x") if valid else ""  # type: ignore[attr-defined]
        record.span_id = format(ctx.span_id, "016x") if valid else ""  # type: ignore[attr-defined]
        return True


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s",
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(
        fmt="%(levelprefix)s %(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        use_colors=True,
    )


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route all logging through one stdout handler.

    Safe to call again: handlers are replaced, not stacked.
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_build_formatter(config.json_output))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    # uvicorn installs its own handlers unless told otherwise
    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
