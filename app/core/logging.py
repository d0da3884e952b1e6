# app/core/logging.py
import logging
import sys
import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Third-party loggers pinned to WARNING whatever the app level:
# httpx/httpcore log every catalog request, redis every reconnect attempt.
QUIET_LOGGERS = ("httpx", "httpcore", "redis")


def configure_logging(level=logging.INFO, *, stream=sys.stdout) -> logging.Handler:
    """
    Install a single colored handler on the root logger and return it.
    Uvicorn's loggers follow the app level; QUIET_LOGGERS stay at WARNING.
    Calling it again replaces the handler instead of stacking a second one.
    """
    handler = colorlog.StreamHandler(stream)
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LEVEL_COLORS))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return handler
