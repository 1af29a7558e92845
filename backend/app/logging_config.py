import logging

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(level: str) -> int:
    """Map a LOG_LEVEL value to a stdlib level; unknown values fall back to INFO."""
    return _LEVELS.get(level.strip().lower(), logging.INFO)


def configure_logging(level: str = "info") -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(parse_level(level)),
        cache_logger_on_first_use=False,
    )
