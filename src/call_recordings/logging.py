import logging
import os
import sys

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "call-recordings"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")

_handler: logging.Handler | None = None


def _build_handler() -> logging.Handler:
    formatter = jsonlogger.JsonFormatter(
        LOG_FORMAT, static_fields={"service": SERVICE_NAME}
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> logging.Logger:
    """
    Routes application and uvicorn logs through one JSON handler on stdout.

    Records carry the service name plus the ddtrace trace_id and span_id
    when a span is active. The level comes from LOG_LEVEL (default INFO).
    Safe to call from every module; the handler is installed once.

    Returns:
        The configured root logger.
    """
    global _handler
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root_logger = logging.getLogger()

    if _handler is None:
        _handler = _build_handler()
        root_logger.handlers = [_handler]
        for name in UVICORN_LOGGERS:
            server_logger = logging.getLogger(name)
            server_logger.handlers = [_handler]
            server_logger.propagate = False

    root_logger.setLevel(level)
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(level)
    return root_logger
