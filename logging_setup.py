"""Structured logging with structlog.

Every aggregation run gets a short trace id bound through contextvars, so the
fetch, per-feed and summary lines of one request can be grouped.
"""
import logging
import sys
import uuid
import structlog

# Loggers of libraries that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "aiohttp.access")


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name, unknown names mean INFO
        log_format: "json" for one object per line, "console" for local runs
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        # stdout carries the `once` command's JSON output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a bound logger instance."""
    return structlog.get_logger(name)


def new_trace_id() -> str:
    """Short id used to correlate the log lines of one aggregation run."""
    return uuid.uuid4().hex[:8]


class TraceContext:
    """Binds trace_id (and any extra fields) for the duration of a run.

    Usage:
        with TraceContext(new_trace_id(), entry="api"):
            result = aggregator.run(batches, now)
    """

    def __init__(self, trace_id: str, **fields):
        self.trace_id = trace_id
        self.fields = fields

    def __enter__(self):
        structlog.contextvars.bind_contextvars(trace_id=self.trace_id, **self.fields)
        return self

    def __exit__(self, *args):
        structlog.contextvars.unbind_contextvars("trace_id", *self.fields)
